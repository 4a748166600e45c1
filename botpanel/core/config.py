# botpanel/core/config.py
import os
from dotenv import load_dotenv


class Settings:
    def __init__(self):
        load_dotenv()
        self.STORE_PATH = os.getenv(
            "BOTPANEL_STORE_PATH", "./botpanel-data/bots.json")
        self.DEFAULT_SERVER_IP = os.getenv(
            "BOTPANEL_DEFAULT_SERVER_IP", "http://127.0.0.1:5000")
        self.DEFAULT_API_KEY = os.getenv("BOTPANEL_DEFAULT_API_KEY", "025002")
        self.REQUEST_TIMEOUT = float(
            os.getenv("BOTPANEL_REQUEST_TIMEOUT", "10"))
        self.LOG_LEVEL = os.getenv("BOTPANEL_LOG_LEVEL", "INFO").upper()
        self.DEFAULT_BOT_NAME = "Bot"


settings = Settings()
