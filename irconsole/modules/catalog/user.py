"""Local account actions."""

from irconsole.modules.catalog.catalog import ActionCategory, ActionMode, Catalog
from irconsole.modules.catalog.entities import EntityKind, User

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
LOGS = ActionCategory.LOG_QUERY

catalog = Catalog(EntityKind.USER)


@catalog.action("user-details", "User details", INFO, "User details - {username}")
def user_details(u: User) -> str:
    return (
        f'id {u.username} 2>/dev/null && echo "" && grep "^{u.username}:" /etc/passwd 2>/dev/null '
        '|| echo "Cannot read user details"'
    )


@catalog.action("group-info", "Groups", INFO, "Groups - {username}")
def group_info(u: User) -> str:
    return f'groups {u.username} 2>/dev/null && echo "" && id {u.username} 2>/dev/null || echo "Cannot read groups"'


@catalog.action("copy-username", "Copy username", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_username(u: User) -> str:
    return u.username


@catalog.action("passwd-expire", "Password expiry", INFO, "Password expiry - {username}")
def passwd_expire(u: User) -> str:
    return f'chage -l {u.username} 2>/dev/null || echo "⚠️ Root is required to read password ageing"'


@catalog.action("user-processes", "Processes", INFO, "Processes - {username}")
def user_processes(u: User) -> str:
    return (
        f"ps -u {u.username} -o pid,ppid,%cpu,%mem,vsz,rss,tty,stat,start,time,cmd 2>/dev/null "
        '|| echo "User has no running processes"'
    )


@catalog.action("home-dir", "Home directory", INFO, "Home directory - {username}")
def home_dir(u: User) -> str:
    return (
        f"home=$(eval echo ~{u.username}); echo \"Home: $home\"; ls -lad \"$home\" 2>/dev/null "
        '&& echo "" && du -sh "$home" 2>/dev/null || echo "Cannot read home directory"'
    )


@catalog.action("user-status", "Account status", INFO, "Account status - {username}")
def user_status(u: User) -> str:
    return (
        f'echo "=== Account status ==="; passwd -S {u.username} 2>/dev/null || echo "⚠️ Requires root"; echo ""; '
        f'echo "=== Last login ==="; lastlog -u {u.username} 2>/dev/null || echo "No login records"'
    )


@catalog.action("group-membership", "Group membership", INFO, "Group membership - {username}")
def group_membership(u: User) -> str:
    return (
        f'echo "=== Groups ==="; groups {u.username} 2>/dev/null; echo ""; '
        f'echo "=== Identity ==="; id {u.username} 2>/dev/null'
    )


@catalog.action("disk-usage", "Disk usage", INFO, "Disk usage - {username}")
def disk_usage(u: User) -> str:
    return (
        f"home=$(eval echo ~{u.username}); "
        'echo "=== Home directory usage ==="; du -sh "$home" 2>/dev/null || echo "Cannot read usage"; echo ""; '
        'echo "=== Largest entries ==="; du -h --max-depth=1 "$home" 2>/dev/null | sort -hr | head -20'
    )


@catalog.action("open-files", "Open files", INFO, "Open files - {username}")
def open_files(u: User) -> str:
    return f'lsof -u {u.username} 2>/dev/null | head -100 || echo "⚠️ Requires root, or the user has no open files"'


@catalog.action("lock-user", "Lock account", MANAGEMENT, "Lock account - {username}")
def lock_user(u: User) -> str:
    return f'echo "Lock account: {u.username}"; echo "Command: passwd -l {u.username}"; echo "⚠️ Requires root"'


@catalog.action("unlock-user", "Unlock account", MANAGEMENT, "Unlock account - {username}")
def unlock_user(u: User) -> str:
    return f'echo "Unlock account: {u.username}"; echo "Command: passwd -u {u.username}"; echo "⚠️ Requires root"'


@catalog.action("kill-sessions", "End sessions", MANAGEMENT, "End sessions - {username}")
def kill_sessions(u: User) -> str:
    return (
        f'echo "End sessions for: {u.username}"; echo "Command: pkill -u {u.username}"; '
        f'echo "⚠️ Requires root"; echo ""; ps -u {u.username} -o pid,cmd 2>/dev/null '
        '|| echo "User has no running processes"'
    )


@catalog.action("disable-ssh", "Deny SSH login", MANAGEMENT, "Deny SSH login - {username}")
def disable_ssh(u: User) -> str:
    return (
        f'echo "Deny SSH login for: {u.username}"; echo ""; '
        'echo "Option 1: edit /etc/ssh/sshd_config"; '
        f'echo "  add: DenyUsers {u.username}"; echo ""; '
        'echo "Option 2: PAM access control, edit /etc/security/access.conf"; '
        f'echo "  add: -:{u.username}:ALL"; echo ""; '
        'echo "⚠️ Requires root and an sshd restart"'
    )


@catalog.action("sudo-permissions", "sudo rights", SECURITY, "sudo rights - {username}")
def sudo_permissions(u: User) -> str:
    return (
        f'echo "=== sudo -l ==="; sudo -l -U {u.username} 2>/dev/null || echo "⚠️ Root required or no sudo rights"; '
        f'echo ""; echo "=== sudoers ==="; grep -E "^{u.username}|^%.*{u.username}" /etc/sudoers 2>/dev/null '
        '|| echo "No sudoers entry"'
    )


@catalog.action("ssh-keys", "SSH keys", SECURITY, "SSH keys - {username}")
def ssh_keys(u: User) -> str:
    return (
        f"home=$(eval echo ~{u.username}); echo \"=== authorized_keys ===\"; "
        'cat "$home/.ssh/authorized_keys" 2>/dev/null || echo "No authorized keys"; echo ""; '
        'echo "=== Private keys ==="; ls -la "$home/.ssh/" 2>/dev/null | grep -E "id_.*[^.pub]$" || echo "No private keys"'
    )


@catalog.action("suid-files", "SUID/SGID files", SECURITY, "SUID files - {username}")
def suid_files(u: User) -> str:
    return (
        f'home=$(eval echo ~{u.username}); echo "=== SUID ==="; '
        'find "$home" -perm -4000 -type f 2>/dev/null | head -20; echo ""; '
        'echo "=== SGID ==="; find "$home" -perm -2000 -type f 2>/dev/null | head -20'
    )


@catalog.action("crontab", "Scheduled jobs", SECURITY, "Scheduled jobs - {username}")
def crontab(u: User) -> str:
    return (
        f'echo "=== User crontab ==="; crontab -u {u.username} -l 2>/dev/null || echo "No crontab or no permission"; '
        f'echo ""; echo "=== System cron ==="; grep -r "{u.username}" /etc/cron* 2>/dev/null | head -20 '
        '|| echo "No system cron entries"'
    )


@catalog.action("abnormal-login", "Unusual logins", SECURITY, "Unusual logins - {username}")
def abnormal_login(u: User) -> str:
    return (
        'echo "=== Off-hours logins (00:00-06:59) ==="; '
        f"last {u.username} 2>/dev/null | awk '$7 ~ /^0[0-6]:[0-5][0-9]/' | head -10; echo \"\"; "
        'echo "=== Logins by source address ==="; '
        f'last {u.username} -i 2>/dev/null | head -20 || echo "No login records"'
    )


@catalog.action("ssh-config", "SSH client config", SECURITY, "SSH config - {username}")
def ssh_config(u: User) -> str:
    return (
        f"home=$(eval echo ~{u.username}); "
        'echo "=== ~/.ssh/config ==="; cat "$home/.ssh/config" 2>/dev/null || echo "No SSH client config"; '
        'echo ""; echo "=== known_hosts ==="; wc -l "$home/.ssh/known_hosts" 2>/dev/null || echo "No known_hosts"'
    )


@catalog.action("suspicious-files", "Suspicious files", SECURITY, "Suspicious files - {username}")
def suspicious_files(u: User) -> str:
    return (
        f"home=$(eval echo ~{u.username}); "
        'echo "=== Hidden files ==="; find "$home" -name ".*" -type f 2>/dev/null | head -20; echo ""; '
        'echo "=== Modified in the last 7 days ==="; find "$home" -type f -mtime -7 2>/dev/null | head -20'
    )


@catalog.action("login-history", "Login history", LOGS, "Login history - {username}")
def login_history(u: User) -> str:
    return f'last {u.username} -n 20 2>/dev/null || echo "No login history"'


@catalog.action("failed-logins", "Failed logins", LOGS, "Failed logins - {username}")
def failed_logins(u: User) -> str:
    return (
        f'lastb {u.username} -n 20 2>/dev/null || grep "{u.username}" /var/log/auth.log 2>/dev/null '
        '| grep -i failed | tail -20 || echo "No failed logins"'
    )


@catalog.action("current-sessions", "Current sessions", LOGS, "Current sessions - {username}")
def current_sessions(u: User) -> str:
    return f'who | grep "^{u.username} " || w {u.username} 2>/dev/null || echo "User is not logged in"'


@catalog.action("last-login", "Last login", LOGS, "Last login - {username}")
def last_login(u: User) -> str:
    return (
        f"lastlog -u {u.username} 2>/dev/null || last {u.username} -n 1 2>/dev/null "
        '|| echo "No login records"'
    )
