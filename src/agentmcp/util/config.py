import json
import os

from dotenv import load_dotenv

# Load global config at module level

PROJECT_ROOT = os.getenv('AGENTMCP_PROJECT_ROOT') or os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"))

config_path = os.getenv('AGENTMCP_CONFIG') or os.path.join(PROJECT_ROOT, "util", "config_dev.json")
if not os.path.exists(config_path):
    config_path = os.path.join(PROJECT_ROOT, "util", "config.json")

with open(config_path) as f:
    CONFIG = json.load(f)
    CONFIG['PROJECT_ROOT'] = PROJECT_ROOT

CONFIG.setdefault("app", {})
CONFIG.setdefault("mcp", {})

if os.getenv("AGENTMCP_LOG_LEVEL"):
    CONFIG["app"]["log_level"] = os.environ["AGENTMCP_LOG_LEVEL"].upper()
if os.getenv("AGENTMCP_LOG_OUTPUT"):
    CONFIG["app"]["log_output"] = os.environ["AGENTMCP_LOG_OUTPUT"]

logs_folder_path = os.path.join(PROJECT_ROOT, CONFIG["app"].get("project_log_folder", "logs"))

mcp_config_path = os.path.join(PROJECT_ROOT, CONFIG["mcp"].get("config_path", "mcp_config.json"))


def default_timeout_seconds() -> int:
    return int(CONFIG["mcp"].get("default_timeout_seconds", 30))
