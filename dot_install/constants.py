"""Constants and default values for dot-install."""

# ============================================================================
# Paths (relative to the home directory unless noted)
# ============================================================================

# Backup directory prefix, completed with a timestamp per run
BACKUP_DIR_PREFIX = ".dotfiles_backup_"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Append-only install log
LOG_FILE_NAME = ".dotfiles_install.log"

# Secrets file and its template (template lives in the repository)
SECRETS_FILE_NAME = ".secrets"
SECRETS_TEMPLATE_NAME = ".secrets.template"
SECRETS_FILE_MODE = 0o600

# Optional manifest at the repository root
MANIFEST_FILE_NAME = "install.toml"

# Global git configuration file
GITCONFIG_FILE_NAME = ".gitconfig"

# ============================================================================
# Managed files
# ============================================================================

# (source in repository, target in home, required)
DEFAULT_LINKS = [
    (".zshrc", ".zshrc", True),
    (".gitignore.global", ".gitignore.global", False),
    ("config", "config", True),
]

# Files the run may touch indirectly; backed up when present
EXTRA_BACKUP_FILES = [
    ".zshrc",
    ".bashrc",
    ".bash_profile",
    ".profile",
    ".gitconfig",
    ".gitignore_global",
]

# Startup files reported during pre-flight
SHELL_CONFIG_FILES = [".zshrc", ".bashrc", ".bash_profile", ".profile"]

# ============================================================================
# Environment detection
# ============================================================================

CI_MARKERS = ["CI"]
CODESPACES_MARKERS = ["CODESPACES"]
REMOTE_CONTAINER_MARKERS = ["REMOTE_CONTAINERS", "REMOTE_CONTAINERS_IPC", "DEVCONTAINER"]

FALSE_VALUES = ("", "0", "false", "no", "off")

# ============================================================================
# Tooling
# ============================================================================

REQUIRED_TOOLS = ["git", "curl"]
PACKAGE_MANAGERS = [("brew", "Homebrew"), ("apt", "APT"), ("yum", "YUM")]

# (command, description, install command)
DEFAULT_OPTIONAL_TOOLS = [
    ("fnm", "Fast Node Manager", "curl -fsSL https://fnm.vercel.app/install | bash"),
    ("pyenv", "Python Version Manager", "curl https://pyenv.run | bash"),
]

# ============================================================================
# Shell framework
# ============================================================================

SHELL_FRAMEWORK_DIR = ".oh-my-zsh"
SHELL_FRAMEWORK_INSTALLER = (
    "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
)
SHELL_FRAMEWORK_PLUGINS = [
    ("zsh-autosuggestions", "https://github.com/zsh-users/zsh-autosuggestions"),
    ("zsh-syntax-highlighting", "https://github.com/zsh-users/zsh-syntax-highlighting"),
]
TARGET_SHELL = "zsh"
SYSTEM_SHELLS_FILE = "/etc/shells"

# ============================================================================
# Git Configuration
# ============================================================================

DEFAULT_GIT_SETTINGS = {
    "core.excludesfile": "~/.gitignore.global",
    "init.defaultBranch": "main",
    "pull.rebase": "false",
    "push.default": "simple",
    "core.autocrlf": "input",
}

# ============================================================================
# Secret scan
# ============================================================================

# Directory names never descended into while scanning the home directory
SCAN_EXCLUDE_DIRS = [
    ".git",
    ".cache",
    "node_modules",
    ".npm",
    ".cargo",
    ".rustup",
    ".pyenv",
    ".oh-my-zsh",
    ".local",
    "Library",
]
SCAN_MAX_FILE_SIZE = 1024 * 1024
