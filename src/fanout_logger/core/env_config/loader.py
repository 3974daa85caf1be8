"""
Configuration loader from environment variables and .env files.

Main entry point for loading configuration.
"""

from typing import Optional

from ..config import LoggerOptions
from .validator import LoggerSettings


def load_from_env(env_file: Optional[str] = None, **overrides) -> LoggerOptions:
    """
    Load LoggerOptions from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (same names as LoggerOptions.create)
    2. Environment variables (FANOUT_LOGGER_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Explicit option overrides

    Returns:
        LoggerOptions instance

    Example:
        >>> options = load_from_env()
        >>> options = load_from_env(env_file=".env.production", level="warn")
    """
    settings = LoggerSettings(_env_file=env_file) if env_file else LoggerSettings()

    options = dict(
        url=settings.url,
        filename=settings.filename,
        dirname=settings.dirname,
        level=settings.level,
        context=settings.context,
        headers=settings.headers,
        auth=settings.auth_dict(),
        log_entries=tuple(settings.log_entries),
        timeout=settings.timeout,
        verify_ssl=settings.verify_ssl,
        console=settings.console,
        console_format=settings.console_format,
        when=settings.file_when,
        backup_count=settings.file_backup_count,
    )
    options.update(overrides)

    if not (options.get("filename") and options.get("dirname")):
        # File rotation options only apply to the file sink
        options.pop("when", None)
        options.pop("backup_count", None)

    return LoggerOptions.create(**options)


def mask_secret(value: Optional[str], visible_chars: int = 4) -> str:
    """
    Mask secret value for printing.

    Example:
        >>> mask_secret("my-secret-api-key-12345")
        'my-s***2345'
        >>> mask_secret("short")
        '***'
    """
    if not value:
        return ""
    if len(value) <= visible_chars * 2:
        return "***"
    return f"{value[:visible_chars]}***{value[-visible_chars:]}"


def print_config_summary(options: LoggerOptions, mask_secrets: bool = True):
    """
    Print configuration summary.

    Useful for debugging and verification.

    Example:
        >>> print_config_summary(load_from_env())
        LoggerOptions:
          level: verbose
          console: text
          ...
    """
    mask = mask_secret if mask_secrets else (lambda v: v or "")

    print("LoggerOptions:")
    print(f"  level: {options.level.value}")
    print(f"  context: {options.context if not callable(options.context) else '<callable>'}")
    print(f"  console: {options.console_format if options.console else 'disabled'}")
    print(f"  log_entries: {', '.join(options.log_entries)}")

    if options.file:
        print(f"  file: {options.file.dirname}/{options.file.filename} (when={options.file.when}, backups={options.file.backup_count})")

    if options.http:
        print(f"  http: {options.http.url}")
        if options.http.headers:
            print(f"    headers: {', '.join(options.http.headers)}")
        auth = options.http.auth
        if auth and auth.bearer:
            print(f"    auth: bearer {mask(auth.bearer)}")
        elif auth and auth.username:
            print(f"    auth: basic {auth.username}:{mask(auth.password)}")
