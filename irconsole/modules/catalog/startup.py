"""Startup item actions. Most management actions only apply to systemd units."""

from irconsole.modules.catalog.catalog import ActionCategory, ActionMode, Catalog
from irconsole.modules.catalog.entities import EntityKind, StartupItem

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
LOGS = ActionCategory.LOG_QUERY

catalog = Catalog(EntityKind.STARTUP)


def _is_systemd(item: StartupItem) -> bool:
    return item.type == "systemd"


def _manual(item: StartupItem, what: str) -> str:
    return f'echo "Startup type: {item.type}"; echo ""; echo "⚠️ {what} must be checked manually for this type"'


@catalog.action("details", "Details", INFO, "Startup item - {name}")
def details(item: StartupItem) -> str:
    return (
        f'echo "Name: {item.name}"; echo "Type: {item.type}"; echo "Path: {item.path}"; '
        f'echo "Command: {item.command}"; echo ""; '
        f'if [ "{item.type}" = "systemd" ]; then systemctl show {item.name} 2>/dev/null '
        '|| echo "Cannot read unit properties"; fi'
    )


@catalog.action("command", "Command", INFO, "Command - {name}")
def command(item: StartupItem) -> str:
    return (
        f'echo "{item.command}"; echo ""; '
        f'which {item.command.split(" ")[0]} 2>/dev/null || echo "Executable not found on PATH"'
    )


@catalog.action("file-path", "File path", INFO, "File path - {name}")
def file_path(item: StartupItem) -> str:
    return f'echo "{item.path}"; echo ""; ls -la "{item.path}" 2>/dev/null || echo "File missing or not accessible"'


_TYPE_NOTES = {
    "systemd": "systemd unit, managed by systemd",
    "rc.local": "Legacy boot script configured in /etc/rc.local",
    "cron": "Scheduled job, managed by cron",
    "init.d": "Legacy SysV init script",
}


@catalog.action("startup-type", "Startup type", INFO, "Startup type - {name}", mode=ActionMode.LOCAL)
def startup_type(item: StartupItem) -> str:
    return f"Type: {item.type}\n\n{_TYPE_NOTES.get(item.type, 'Other startup mechanism')}"


@catalog.action("config-location", "Config location", INFO, "Config location - {name}")
def config_location(item: StartupItem) -> str:
    return (
        f'echo "{item.path}"; echo ""; '
        f'dirname "{item.path}" | xargs ls -la 2>/dev/null || echo "Cannot list directory"'
    )


@catalog.action("view-config", "View config", INFO, "Config - {name}")
def view_config(item: StartupItem) -> str:
    return f'cat "{item.path}" 2>/dev/null || systemctl cat {item.name} 2>/dev/null || echo "Cannot read config"'


@catalog.action("copy-name", "Copy name", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_name(item: StartupItem) -> str:
    return item.name


@catalog.action("enable", "Enable", MANAGEMENT, "Enable - {name}")
def enable(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'systemctl enable {item.name} 2>&1 && echo "✓ Enabled" || echo "✗ Enable failed"'
    return _manual(item, "Enabling")


@catalog.action("disable", "Disable", MANAGEMENT, "Disable - {name}")
def disable(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'systemctl disable {item.name} 2>&1 && echo "✓ Disabled" || echo "✗ Disable failed"'
    return _manual(item, "Disabling")


@catalog.action("run-now", "Run now", MANAGEMENT, "Run now - {name}")
def run_now(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'systemctl start {item.name} 2>&1 || echo "Start failed"'
    return f"{item.command} 2>&1 &"


@catalog.action("suspicious-path", "Suspicious path", SECURITY, "Suspicious path - {name}")
def suspicious_path(item: StartupItem) -> str:
    return (
        f'if [[ "{item.path}" =~ ^(/tmp|/dev/shm|/var/tmp) ]]; then echo "⚠️ File in suspicious directory: {item.path}"; '
        'else echo "✓ File path looks normal"; fi; '
        f'if [[ "{item.command}" =~ ^(/tmp|/dev/shm|/var/tmp) ]]; then echo "⚠️ Command in suspicious directory"; '
        'else echo "✓ Command path looks normal"; fi'
    )


@catalog.action("file-signature", "File hashes", SECURITY, "File hashes - {name}")
def file_signature(item: StartupItem) -> str:
    return (
        f'file "{item.path}" 2>/dev/null || echo "Cannot detect file type"; echo ""; '
        f'md5sum "{item.path}" 2>/dev/null || echo "Cannot hash (MD5)"; echo ""; '
        f'sha256sum "{item.path}" 2>/dev/null || echo "Cannot hash (SHA256)"'
    )


@catalog.action("modification-time", "Modification time", SECURITY, "Modification time - {name}")
def modification_time(item: StartupItem) -> str:
    return (
        f'stat "{item.path}" 2>/dev/null || echo "Cannot stat file"; echo ""; '
        f'find "{item.path}" -mtime -7 2>/dev/null | grep -q . && echo "⚠️ Modified in the last 7 days" '
        '|| echo "✓ Not modified in the last 7 days"'
    )


@catalog.action("malware-check", "Malware indicators", SECURITY, "Malware indicators - {name}")
def malware_check(item: StartupItem) -> str:
    return (
        f'echo "1. Suspicious strings:"; strings "{item.path}" 2>/dev/null '
        '| grep -iE "(wget|curl|/tmp|/dev/shm|nc -|bash -i|/bin/sh)" | head -10 || echo "None found"; echo ""; '
        f'echo "2. Network code:"; strings "{item.path}" 2>/dev/null '
        '| grep -iE "(socket|connect|bind|listen)" | head -5 || echo "None found"'
    )


@catalog.action("dependencies", "Dependencies", INFO, "Dependencies - {name}")
def dependencies(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'systemctl list-dependencies {item.name} --no-pager 2>/dev/null || echo "Cannot list dependencies"'
    return _manual(item, "Dependencies")


@catalog.action("boot-order", "Boot order", INFO, "Boot order - {name}")
def boot_order(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'systemd-analyze critical-chain {item.name} 2>/dev/null || echo "Cannot read boot order"'
    return _manual(item, "Boot order")


@catalog.action("boot-time", "Boot time impact", INFO, "Boot time impact - {name}")
def boot_time(item: StartupItem) -> str:
    if _is_systemd(item):
        return (
            f'systemd-analyze blame | grep {item.name} 2>/dev/null || echo "Cannot measure boot impact"; '
            'echo ""; systemd-analyze time 2>/dev/null'
        )
    return _manual(item, "Boot time")


@catalog.action("resource-usage", "Resource usage", INFO, "Resource usage - {name}")
def resource_usage(item: StartupItem) -> str:
    if _is_systemd(item):
        return (
            f'systemctl status {item.name} 2>/dev/null | grep -E "(CPU|Memory|Tasks)" '
            '|| echo "Not running or no resource data"'
        )
    return f'ps aux | grep "{item.command}" | grep -v grep || echo "Not running"'


@catalog.action("startup-logs", "Startup logs", LOGS, "Startup logs - {name}")
def startup_logs(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'journalctl -u {item.name} -n 50 --no-pager 2>/dev/null || echo "Cannot read logs"'
    return _manual(item, "Logs")


@catalog.action("error-logs", "Error logs", LOGS, "Error logs - {name}")
def error_logs(item: StartupItem) -> str:
    if _is_systemd(item):
        return f'journalctl -u {item.name} -p err -n 30 --no-pager 2>/dev/null || echo "No error logs"'
    return f'grep -i error /var/log/syslog 2>/dev/null | grep "{item.name}" | tail -30 || echo "No error logs"'


@catalog.action("run-history", "Run history", LOGS, "Run history - {name}")
def run_history(item: StartupItem) -> str:
    if _is_systemd(item):
        return (
            f'journalctl -u {item.name} --no-pager 2>/dev/null | grep -E "(Started|Stopped)" | tail -20 '
            '|| echo "No run history"'
        )
    return f'grep "{item.name}" /var/log/syslog 2>/dev/null | tail -20 || echo "No run history"'


@catalog.action("delay-start", "Start timeouts", INFO, "Start timeouts - {name}")
def delay_start(item: StartupItem) -> str:
    if _is_systemd(item):
        return (
            f"systemctl show {item.name} --property=TimeoutStartUSec,TimeoutStopUSec 2>/dev/null "
            '|| echo "Cannot read unit properties"'
        )
    return _manual(item, "Start delay")


@catalog.action("backup", "Back up config", MANAGEMENT, "Back up config - {name}")
def backup(item: StartupItem) -> str:
    return (
        f'echo "Name: {item.name}"; echo "Type: {item.type}"; echo "Path: {item.path}"; '
        f'echo "Command: {item.command}"; echo ""; echo "=== Config ==="; '
        f'cat "{item.path}" 2>/dev/null || systemctl cat {item.name} 2>/dev/null || echo "Cannot read config"'
    )
