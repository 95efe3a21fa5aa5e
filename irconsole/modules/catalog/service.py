"""systemd / SysV service actions."""

from irconsole.modules.catalog.catalog import ActionCategory, ActionMode, Catalog
from irconsole.modules.catalog.entities import EntityKind, Service

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
LOGS = ActionCategory.LOG_QUERY

catalog = Catalog(EntityKind.SERVICE)


@catalog.action("status", "Service status", INFO, "Service status - {name}")
def status(s: Service) -> str:
    return (
        f"systemctl status {s.name} 2>/dev/null || service {s.name} status 2>/dev/null "
        '|| echo "Cannot read service status"'
    )


@catalog.action("config", "Unit file", INFO, "Unit file - {name}")
def config(s: Service) -> str:
    return (
        f"systemctl cat {s.name} 2>/dev/null || cat /etc/init.d/{s.name} 2>/dev/null "
        '|| echo "Unit file not found"'
    )


@catalog.action("details", "Properties", INFO, "Properties - {name}")
def details(s: Service) -> str:
    return f'systemctl show {s.name} 2>/dev/null || echo "Cannot read service properties"'


@catalog.action("copy-name", "Copy name", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_name(s: Service) -> str:
    return s.name


@catalog.action("start", "Start", MANAGEMENT, "Start service - {name}")
def start(s: Service) -> str:
    return f"systemctl start {s.name} 2>&1 || service {s.name} start 2>&1"


@catalog.action("stop", "Stop", MANAGEMENT, "Stop service - {name}")
def stop(s: Service) -> str:
    return f"systemctl stop {s.name} 2>&1 || service {s.name} stop 2>&1"


@catalog.action("restart", "Restart", MANAGEMENT, "Restart service - {name}")
def restart(s: Service) -> str:
    return f"systemctl restart {s.name} 2>&1 || service {s.name} restart 2>&1"


@catalog.action("reload", "Reload", MANAGEMENT, "Reload service - {name}")
def reload(s: Service) -> str:
    return (
        f"systemctl reload {s.name} 2>&1 || service {s.name} reload 2>&1 "
        '|| echo "Service does not support reload"'
    )


@catalog.action("enable", "Enable at boot", MANAGEMENT, "Enable at boot - {name}")
def enable(s: Service) -> str:
    return f'systemctl enable {s.name} 2>&1 && echo "✓ Enabled at boot" || echo "✗ Enable failed"'


@catalog.action("disable", "Disable at boot", MANAGEMENT, "Disable at boot - {name}")
def disable(s: Service) -> str:
    return f'systemctl disable {s.name} 2>&1 && echo "✓ Disabled at boot" || echo "✗ Disable failed"'


@catalog.action("logs", "Recent logs", LOGS, "Service logs - {name}")
def logs(s: Service) -> str:
    return (
        f"journalctl -u {s.name} -n 100 --no-pager 2>/dev/null || tail -100 /var/log/{s.name}.log 2>/dev/null "
        '|| echo "Cannot read logs"'
    )


@catalog.action("errors", "Error logs", LOGS, "Error logs - {name}")
def errors(s: Service) -> str:
    return (
        f"journalctl -u {s.name} -p err -n 50 --no-pager 2>/dev/null "
        f"|| grep -i error /var/log/{s.name}.log 2>/dev/null | tail -50 || echo \"No error logs\""
    )


@catalog.action("live-logs", "Follow logs (10s)", LOGS, "Live logs - {name}")
def live_logs(s: Service) -> str:
    return (
        f"timeout 10 journalctl -u {s.name} -n 20 -f --no-pager 2>/dev/null "
        f"|| timeout 10 tail -n 20 -f /var/log/{s.name}.log 2>/dev/null || echo \"Cannot follow logs\""
    )


@catalog.action("dependencies", "Dependencies", INFO, "Dependencies - {name}")
def dependencies(s: Service) -> str:
    return f'systemctl list-dependencies {s.name} --no-pager 2>/dev/null || echo "Cannot list dependencies"'


@catalog.action("reverse-dependencies", "Required by", INFO, "Required by - {name}")
def reverse_dependencies(s: Service) -> str:
    return (
        f"systemctl list-dependencies {s.name} --reverse --no-pager 2>/dev/null "
        '|| echo "Cannot list reverse dependencies"'
    )


@catalog.action("service-tree", "Full dependency tree", INFO, "Dependency tree - {name}")
def service_tree(s: Service) -> str:
    return f'systemctl list-dependencies {s.name} --all --no-pager 2>/dev/null || echo "Cannot list the tree"'


@catalog.action("cpu-usage", "CPU usage", INFO, "CPU usage - {name}")
def cpu_usage(s: Service) -> str:
    return (
        f'systemctl status {s.name} 2>/dev/null | grep "CPU:" '
        f"|| ps aux | grep {s.name} | grep -v grep | awk '{{print \"CPU: \"$3\"%\"}}' "
        '|| echo "Cannot read CPU usage"'
    )


@catalog.action("memory-usage", "Memory usage", INFO, "Memory usage - {name}")
def memory_usage(s: Service) -> str:
    return (
        f'systemctl status {s.name} 2>/dev/null | grep "Memory:" '
        f"|| ps aux | grep {s.name} | grep -v grep | awk '{{print \"Memory: \"$4\"% (\"$6\" KB)\"}}' "
        '|| echo "Cannot read memory usage"'
    )


@catalog.action("process-list", "Processes", INFO, "Processes - {name}")
def process_list(s: Service) -> str:
    return (
        f'systemctl status {s.name} 2>/dev/null | grep -A 20 "CGroup:" '
        f'|| ps aux | grep {s.name} | grep -v grep || echo "Cannot list processes"'
    )


@catalog.action("open-files", "Open files", INFO, "Open files - {name}")
def open_files(s: Service) -> str:
    return (
        f"pid=$(systemctl show {s.name} --property=MainPID --value 2>/dev/null); "
        'if [ -n "$pid" ] && [ "$pid" != "0" ]; then lsof -p $pid 2>/dev/null | head -50 '
        '|| echo "Cannot list open files"; else echo "Service is not running"; fi'
    )


@catalog.action("run-user", "Run-as user", SECURITY, "Run-as user - {name}")
def run_user(s: Service) -> str:
    return (
        f"systemctl show {s.name} --property=User,Group,UID,GID 2>/dev/null "
        f"|| ps aux | grep {s.name} | grep -v grep | awk '{{print \"User: \"$1}}' || echo \"Cannot resolve user\""
    )


@catalog.action("permissions", "Capabilities and sandboxing", SECURITY, "Permissions - {name}")
def permissions(s: Service) -> str:
    return (
        f"systemctl show {s.name} --property=CapabilityBoundingSet,AmbientCapabilities,NoNewPrivileges,"
        'PrivateTmp,ProtectSystem,ProtectHome 2>/dev/null || echo "Cannot read permissions"'
    )


@catalog.action("security-check", "Hardening check", SECURITY, "Hardening check - {name}")
def security_check(s: Service) -> str:
    return (
        f"systemctl show {s.name} --property=User,DynamicUser,PrivateTmp,ProtectSystem,ProtectHome,"
        "NoNewPrivileges,PrivateDevices,ProtectKernelTunables,ProtectControlGroups,RestrictRealtime "
        '2>/dev/null || echo "Cannot read hardening settings"'
    )


@catalog.action("edit-service", "Service file", INFO, "Service file - {name}")
def edit_service(s: Service) -> str:
    return (
        f"systemctl cat {s.name} 2>/dev/null || cat /etc/init.d/{s.name} 2>/dev/null "
        f"|| cat /lib/systemd/system/{s.name}.service 2>/dev/null || echo \"Service file not found\""
    )


@catalog.action("timer", "Timers", INFO, "Timers - {name}")
def timer(s: Service) -> str:
    return f'systemctl list-timers --all | grep {s.name} || echo "No timer for this service"'


@catalog.action("environment", "Environment", SECURITY, "Environment - {name}")
def environment(s: Service) -> str:
    return (
        f"systemctl show {s.name} --property=Environment,EnvironmentFiles 2>/dev/null "
        '|| echo "Cannot read environment"'
    )
