import csv
import os
from datetime import datetime

LOG_DIR = "family_tree_data"
LOG_FILE = os.path.join(LOG_DIR, "activity_log.csv")


class LoggerService:
    def __init__(self, log_file: str = None, user: str = "System"):
        self.log_file = log_file or LOG_FILE
        self.user = user
        if not os.path.exists(self.log_file):
            log_dir = os.path.dirname(self.log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            with open(self.log_file, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(["Timestamp", "User", "Action", "Details"])

    def log(self, action: str, details: str):
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            with open(self.log_file, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow([timestamp, self.user, action, details])
        except OSError as e:
            print(f"Logging error: {e}")

    def get_recent_logs(self, limit=20):
        if not os.path.exists(self.log_file): return []
        try:
            with open(self.log_file, 'r', encoding='utf-8') as f:
                reader = list(csv.reader(f))
                if len(reader) < 2: return []
                data = reader[1:]
                return data[-limit:][::-1]
        except OSError:
            return []
