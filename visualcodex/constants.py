"""Constants used throughout the visualcodex package."""

from pathlib import Path
from colorama import Fore, Style

# Configuration paths
CONFIG_DIR = Path.home() / ".config" / "visualcodex"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# ANSI Color Codes (using colorama)
CLR_RESET = Style.RESET_ALL
CLR_RED = Fore.RED
CLR_BOLD_RED = Style.BRIGHT + Fore.RED
CLR_GREEN = Fore.GREEN
CLR_BOLD_GREEN = Style.BRIGHT + Fore.GREEN
CLR_YELLOW = Fore.YELLOW
CLR_BOLD_YELLOW = Style.BRIGHT + Fore.YELLOW
CLR_BLUE = Fore.BLUE
CLR_BOLD_BLUE = Style.BRIGHT + Fore.BLUE
CLR_MAGENTA = Fore.MAGENTA
CLR_BOLD_MAGENTA = Style.BRIGHT + Fore.MAGENTA
CLR_CYAN = Fore.CYAN
CLR_BOLD_CYAN = Style.BRIGHT + Fore.CYAN
CLR_WHITE = Fore.WHITE
CLR_BOLD_WHITE = Style.BRIGHT + Fore.WHITE

# Autonomy levels, least to most permissive
APPROVAL_MODES = ["suggest", "auto-edit", "full-auto"]

# Provider whose key is preferred when several are configured
PREFERRED_PROVIDER = "OpenAI"
API_KEY_ENV_VAR = "OPENAI_API_KEY"

# Default configuration values
DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_APPROVAL_MODE = "suggest"
DEFAULT_TEMPERATURE = 0.9
DEFAULT_MAX_TOKENS = 4000
DEFAULT_REQUEST_TIMEOUT = 120
DEFAULT_ENABLE_DEBUG = False

# Where the reply text lives in a chat-completion response
RESPONSE_PATH = ".choices[0].message.content"

# Extensions a fenced block's path must end with to count as a file write
FILE_WRITE_EXTENSIONS = [
    "js", "ts", "jsx", "tsx", "css", "html", "json", "md", "py", "rb", "go",
    "rs", "php", "java", "c", "cpp", "h", "hpp", "cs", "sql",
]

# Fence paths containing these mark illustrative snippets
ILLUSTRATIVE_PATH_MARKERS = ["example", "sample"]

# Fence paths starting with these are language tags, not files
LANGUAGE_TAG_PREFIXES = ["bash", "javascript", "typescript"]

# Upper bound on threads used for a batch of file operations
MAX_IO_WORKERS = 8
