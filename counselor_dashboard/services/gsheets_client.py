import streamlit as st
import json
import gspread
from google.oauth2.service_account import Credentials
import structlog

logger = structlog.get_logger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


# -----------------------------
# Google Sheets client (safe to cache)
# -----------------------------
@st.cache_resource
def get_gsheets_client():
    creds_dict = st.secrets["GOOGLE_SHEETS_CREDENTIALS"]
    if isinstance(creds_dict, str):
        creds_dict = json.loads(creds_dict)

    credentials = Credentials.from_service_account_info(dict(creds_dict), scopes=SCOPES)
    logger.info("gsheets_client_authorized", client_email=creds_dict.get("client_email"))
    return gspread.authorize(credentials)


@st.cache_resource
def get_spreadsheet():
    client = get_gsheets_client()
    sheet_id = st.secrets["GOOGLE_SHEET_ID"]
    return client.open_by_key(sheet_id)
