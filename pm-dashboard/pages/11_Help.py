import streamlit as st

from src.ui import page_header, require_session


session = require_session()

FAQ = [
    (
        "How do I create a project?",
        "Open **Projects** and click **New project**. Pick a template to start with a ready-made task list, "
        "or tick the kickoff option to add a single starter task.",
    ),
    (
        "Where do my tasks come from?",
        "Tasks live inside projects. **My Tasks** gathers every task across all projects and sorts them "
        "into overdue, today, upcoming and completed.",
    ),
    (
        "How does time tracking work?",
        "Start the timer on **Time Tracking** and stop it when you're done. Anything shorter than a minute "
        "is discarded. You can also log hours manually for any day.",
    ),
    (
        "Why do the reports say demo data?",
        "When demo mode is switched on the Reports page shows generated figures instead of your "
        "time entries. Ask your administrator to turn it off to see real numbers.",
    ),
    (
        "Can I hide pages I don't use?",
        "Yes. Go to **Settings → Pages** and untick them. Projects and Settings always stay visible.",
    ),
    (
        "Who can sign in?",
        "Only email addresses on the allow-list. Anyone else is signed out straight away.",
    ),
]

page_header("Help", "Answers to common questions")

query = st.text_input("Search help", placeholder="e.g. timer, templates")
matches = [(q, a) for q, a in FAQ if not query or query.lower() in (q + a).lower()]

if not matches:
    st.info("No answers match your search.")
for question, answer in matches:
    with st.expander(question):
        st.markdown(answer)

st.divider()
st.caption(f"Signed in as {session.email}")
