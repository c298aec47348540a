import logging
import sys
import os
import agentmcp.util.config as config

# Define a TRACE level at 5 (lower than DEBUG)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.TRACE = TRACE_LEVEL

def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)

# Add the new level to the logger class
logging.Logger.trace = trace

log_level = config.CONFIG["app"].get("log_level", logging.INFO)
log_output = config.CONFIG["app"].get("log_output", "stderr").lower()

# ---- sink selection ----
if log_output == "file":
    if not os.path.exists(config.logs_folder_path):
        os.makedirs(config.logs_folder_path)
    handler = logging.FileHandler(os.path.join(config.logs_folder_path, "agentmcp.log"), encoding="utf-8")
elif log_output == "stdout":
    handler = logging.StreamHandler(sys.stdout)
else:  # default: stderr
    handler = logging.StreamHandler(sys.stderr)

handler.setFormatter(logging.Formatter(
    fmt="%(asctime)s - %(levelname)s - %(name)s  -  %(funcName)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
))

# Library logger: configure the package root only, leave the host's root logger alone
_package_logger = logging.getLogger("agentmcp")
_package_logger.setLevel(log_level)
if not _package_logger.handlers:
    _package_logger.addHandler(handler)


def getLogger(name):
    return logging.getLogger(name)
