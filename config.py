from pathlib import Path
import os
import sys

STORAGE_BACKENDS = {"sql", "local"}


def app_root_dir() -> Path:
    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        return exe_dir.parent
    return Path(__file__).resolve().parent


def _resolve_data_file(root_dir: Path, env_name: str, default_name: str) -> Path:
    custom_path = os.getenv(env_name)
    if not custom_path:
        data_dir = root_dir / "data"
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / default_name

    path = Path(custom_path).expanduser()
    if not path.is_absolute():
        path = (root_dir / path).resolve()

    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def resolve_db_path(root_dir: Path) -> Path:
    return _resolve_data_file(root_dir, "APP_DB_PATH", "lending.db")


def resolve_local_store_path(root_dir: Path) -> Path:
    return _resolve_data_file(root_dir, "APP_LOCAL_STORE_PATH", "local_store.json")


def storage_backend() -> str:
    value = (os.getenv("APP_STORAGE") or "sql").strip().lower()
    if value not in STORAGE_BACKENDS:
        raise ValueError(f"APP_STORAGE must be one of {sorted(STORAGE_BACKENDS)}, got {value!r}")
    return value


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def seed_sample_data() -> bool:
    return _flag("APP_SEED_SAMPLE_DATA", True)


def log_level() -> str:
    return (os.getenv("APP_LOG_LEVEL") or "INFO").upper()


def accounts() -> dict[str, tuple[str, str]]:
    """username -> (password, role)"""
    admin_user = os.getenv("APP_ADMIN_USERNAME", "admin")
    admin_password = os.getenv("APP_ADMIN_PASSWORD", "admin123")
    student_user = os.getenv("APP_STUDENT_USERNAME", "siswa")
    student_password = os.getenv("APP_STUDENT_PASSWORD", "siswa123")
    return {
        admin_user: (admin_password, "admin"),
        student_user: (student_password, "student"),
    }
