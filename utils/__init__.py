from .env import load_project_dotenv  # noqa: F401
from .logger import get_logger  # noqa: F401

# Automatically load project-level .env once utils is imported.
load_project_dotenv()
