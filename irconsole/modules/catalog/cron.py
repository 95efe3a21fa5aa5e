"""Cron job actions."""

import json
from typing import Any, Dict

from irconsole.modules.catalog.catalog import ActionCategory, ActionMode, Catalog
from irconsole.modules.catalog.entities import CronJob, EntityKind

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
LOGS = ActionCategory.LOG_QUERY


def _program(command: str) -> str:
    return command.split(" ")[0]


def _fields(job: CronJob) -> Dict[str, Any]:
    values = job.model_dump()
    values.update(short_command=f"{job.command[:50]}...", program=_program(job.command))
    return values


catalog = Catalog(EntityKind.CRON, fields=_fields)


@catalog.action("details", "Job details", INFO, "Cron job - {user}")
def details(job: CronJob) -> str:
    return (
        f'echo "=== Cron job ==="; echo "User: {job.user}"; echo "Schedule: {job.schedule}"; '
        f'echo "Command: {job.command}"; echo ""; echo "=== Status ==="; '
        f'crontab -u {job.user} -l 2>/dev/null | grep -F "{job.command}" || echo "Job may have been removed or changed"'
    )


@catalog.action("schedule", "Schedule breakdown", INFO, "Schedule - {schedule}")
def schedule(job: CronJob) -> str:
    return (
        f'echo "Expression: {job.schedule}"; echo ""; '
        'echo "minute(0-59) hour(0-23) day(1-31) month(1-12) weekday(0-7)"; echo ""; '
        f"echo \"{job.schedule}\" | awk '{{print \"minute: \"$1; print \"hour: \"$2; "
        "print \"day: \"$3; print \"month: \"$4; print \"weekday: \"$5}'"
    )


@catalog.action("command", "Command", INFO, "Command - {short_command}")
def command(job: CronJob) -> str:
    return (
        f'echo "{job.command}"; echo ""; '
        f'which {_program(job.command)} 2>/dev/null || echo "Program not found in PATH"'
    )


@catalog.action("copy-command", "Copy command", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_command(job: CronJob) -> str:
    return job.command


@catalog.action("run-now", "Run now", MANAGEMENT, "Run now - {short_command}")
def run_now(job: CronJob) -> str:
    return f'echo "Running cron job for {job.user}"; echo "Command: {job.command}"; echo ""; {job.command}'


@catalog.action("test-command", "Syntax check", MANAGEMENT, "Syntax check - {short_command}")
def test_command(job: CronJob) -> str:
    return (
        f'bash -n -c "{job.command}" 2>&1 && echo "✓ Syntax OK" || echo "✗ Syntax error"; '
        'echo ""; echo "⚠️ This is only a syntax check"'
    )


@catalog.action("view-crontab", "Full crontab", INFO, "Crontab - {user}")
def view_crontab(job: CronJob) -> str:
    return f'crontab -u {job.user} -l 2>/dev/null || echo "User {job.user} has no crontab"'


@catalog.action("backup", "Back up crontab", MANAGEMENT, "Back up crontab - {user}")
def backup(job: CronJob) -> str:
    return (
        f'backup_file="/tmp/crontab_{job.user}_$(date +%Y%m%d_%H%M%S).bak"; '
        f'crontab -u {job.user} -l > "$backup_file" 2>/dev/null && echo "✓ Backed up to $backup_file" '
        '&& cat "$backup_file" || echo "✗ Backup failed"'
    )


@catalog.action("execution-logs", "Execution log", LOGS, "Execution log - {short_command}")
def execution_logs(job: CronJob) -> str:
    program = _program(job.command)
    return (
        f'grep CRON /var/log/syslog 2>/dev/null | grep "{job.user}" | grep "{program}" | tail -50 '
        f'|| journalctl -u cron 2>/dev/null | grep "{job.user}" | grep "{program}" | tail -50 '
        '|| echo "No execution log"'
    )


@catalog.action("recent-runs", "Recent runs", LOGS, "Recent runs - {user}")
def recent_runs(job: CronJob) -> str:
    return (
        f'grep CRON /var/log/syslog 2>/dev/null | grep "({job.user})" | tail -20 '
        f'|| journalctl -u cron 2>/dev/null | grep "{job.user}" | tail -20 || echo "No recent runs"'
    )


@catalog.action("error-logs", "Error log", LOGS, "Error log - {user}")
def error_logs(job: CronJob) -> str:
    return (
        f'grep -i "error\\|fail\\|cron" /var/log/syslog 2>/dev/null | grep "{job.user}" | tail -30 '
        f'|| journalctl -p err 2>/dev/null | grep cron | grep "{job.user}" | tail -30 || echo "No error log"'
    )


@catalog.action("parse-cron", "Explain schedule", INFO, "Schedule expression - {schedule}")
def parse_cron(job: CronJob) -> str:
    s = job.schedule
    return (
        f'echo "Expression: {s}"; echo ""; '
        f'case "{s}" in '
        '@hourly) echo "Every hour (0 * * * *)";; '
        '@daily|@midnight) echo "Every day at midnight (0 0 * * *)";; '
        '@weekly) echo "Every Sunday at midnight (0 0 * * 0)";; '
        '@monthly) echo "First day of every month at midnight (0 0 1 * *)";; '
        '@yearly|@annually) echo "Every January 1st at midnight (0 0 1 1 *)";; '
        '@reboot) echo "At system boot";; '
        f"*) echo \"{s}\" | awk '{{print \"Minute: \"$1\" (0-59)\"; print \"Hour: \"$2\" (0-23)\"; "
        "print \"Day of month: \"$3\" (1-31)\"; print \"Month: \"$4\" (1-12)\"; "
        "print \"Day of week: \"$5\" (0-7, 0 and 7 are Sunday)\"}';; esac"
    )


@catalog.action("next-run", "Next run", INFO, "Next run - {schedule}")
def next_run(job: CronJob) -> str:
    s = job.schedule
    return (
        "echo \"Now: $(date '+%Y-%m-%d %H:%M:%S')\"; "
        f'echo "Schedule: {s}"; echo ""; '
        f'case "{s}" in '
        '@hourly) echo "Next run: at the top of the next hour";; '
        '@daily|@midnight) echo "Next run: tomorrow 00:00";; '
        '@weekly) echo "Next run: next Sunday 00:00";; '
        '@monthly) echo "Next run: the 1st of next month 00:00";; '
        '*) echo "Standard expression: use a cron calculator for the exact time";; esac'
    )


@catalog.action("frequency", "Run frequency", INFO, "Run frequency - {schedule}")
def frequency(job: CronJob) -> str:
    s = job.schedule
    return (
        f'echo "Schedule: {s}"; echo ""; '
        f'if [[ "{s}" == "@hourly" ]]; then echo "Once an hour, 24 per day, ~720 per month"; '
        f'elif [[ "{s}" == "@daily" ]]; then echo "Once a day, ~30 per month, 365 per year"; '
        f'elif [[ "{s}" == "@weekly" ]]; then echo "Once a week, ~4 per month, 52 per year"; '
        f'elif [[ "{s}" == "@monthly" ]]; then echo "Once a month, 12 per year"; '
        f'elif [[ "{s}" =~ ^\\*.*\\*.*\\*.*\\*.*\\*$ ]]; then echo "Every minute, 60 per hour, 1440 per day"; '
        'else echo "Custom frequency: work it out from the expression"; fi'
    )


@catalog.action("security-check", "Command safety", SECURITY, "Command safety - {short_command}")
def security_check(job: CronJob) -> str:
    return (
        f'if echo "{job.command}" | grep -qE "rm -rf|dd if=|mkfs|fdisk|>/dev/"; '
        'then echo "⚠️ Destructive command"; else echo "✓ No destructive commands"; fi; '
        f'if echo "{job.command}" | grep -qE "wget|curl|nc|telnet|ssh"; '
        'then echo "⚠️ Network activity"; else echo "✓ No network activity"; fi'
    )


@catalog.action("check-path", "Program path", SECURITY, "Program path - {program}")
def check_path(job: CronJob) -> str:
    return (
        f'cmd_name="{_program(job.command)}"; echo "Program: $cmd_name"; '
        'which "$cmd_name" 2>/dev/null && ls -la $(which "$cmd_name") 2>/dev/null '
        '|| echo "⚠️ Program is not in PATH"'
    )


@catalog.action("suspicious-check", "Suspicious patterns", SECURITY, "Suspicious patterns - {short_command}")
def suspicious_check(job: CronJob) -> str:
    return (
        f'if echo "{job.command}" | grep -qE "base64|eval|exec"; '
        'then echo "⚠️ Possible encoding or obfuscation"; else echo "✓ No encoding"; fi; '
        f'if echo "{job.command}" | grep -qE "bash -i|/bin/sh|nc.*-e"; '
        'then echo "⚠️ Possible reverse shell"; else echo "✓ No reverse shell pattern"; fi; '
        f'if echo "{job.command}" | grep -qE "/tmp|/dev/shm"; '
        'then echo "⚠️ Runs from a temporary directory"; else echo "✓ No temporary paths"; fi'
    )


@catalog.action("export", "Export as JSON", INFO, "Export - {short_command}", mode=ActionMode.LOCAL)
def export(job: CronJob) -> str:
    return json.dumps({"user": job.user, "schedule": job.schedule, "command": job.command}, indent=2)
