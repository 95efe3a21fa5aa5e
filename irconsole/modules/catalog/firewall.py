"""Firewall rule actions (iptables, falling back to firewalld and ufw)."""

from irconsole.modules.catalog.catalog import ActionCategory, ActionMode, Catalog
from irconsole.modules.catalog.entities import EntityKind, FirewallRule

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
LOGS = ActionCategory.LOG_QUERY

NO_IPTABLES = 'echo "⚠️ iptables is not available"'

catalog = Catalog(EntityKind.FIREWALL)


@catalog.action("rule-details", "Rule details", INFO, "Firewall rule details", mode=ActionMode.LOCAL)
def rule_details(r: FirewallRule) -> str:
    return (
        f"Chain: {r.chain}\nTarget: {r.target}\nProtocol: {r.protocol}\n"
        f"Source: {r.source}\nDestination: {r.destination}\nOptions: {r.options}"
    )


@catalog.action("copy-rule", "Copy rule", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_rule(r: FirewallRule) -> str:
    return f"{r.chain} {r.target} {r.protocol} {r.source} {r.destination} {r.options}"


@catalog.action("copy-source", "Copy source", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_source(r: FirewallRule) -> str:
    return r.source


@catalog.action("copy-destination", "Copy destination", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_destination(r: FirewallRule) -> str:
    return r.destination


@catalog.action("list-all-rules", "All rules", INFO, "All firewall rules")
def list_all_rules(r: FirewallRule) -> str:
    return (
        'if command -v iptables >/dev/null 2>&1; then echo "=== iptables ==="; iptables -L -n -v --line-numbers; '
        'elif command -v firewall-cmd >/dev/null 2>&1; then echo "=== firewalld ==="; firewall-cmd --list-all; '
        'elif command -v ufw >/dev/null 2>&1; then echo "=== ufw ==="; ufw status verbose; '
        'else echo "⚠️ No firewall tool found"; fi'
    )


@catalog.action("list-chain-rules", "Chain rules", INFO, "{chain} chain rules")
def list_chain_rules(r: FirewallRule) -> str:
    return (
        f'if command -v iptables >/dev/null 2>&1; then echo "=== {r.chain} ==="; '
        f"iptables -L {r.chain} -n -v --line-numbers; else {NO_IPTABLES}; fi"
    )


@catalog.action("default-policy", "Default policy", INFO, "Default policy")
def default_policy(r: FirewallRule) -> str:
    return f'if command -v iptables >/dev/null 2>&1; then iptables -L | grep "Chain" | grep "policy"; else {NO_IPTABLES}; fi'


@catalog.action("save-rules", "Save rules", MANAGEMENT, "Save firewall rules")
def save_rules(r: FirewallRule) -> str:
    return (
        "if command -v iptables-save >/dev/null 2>&1; then iptables-save > /etc/iptables/rules.v4 2>/dev/null "
        '&& echo "✓ Rules saved" || echo "⚠️ Save failed, root required"; '
        "elif command -v firewall-cmd >/dev/null 2>&1; then firewall-cmd --runtime-to-permanent "
        '&& echo "✓ Rules saved"; else echo "⚠️ No firewall tool found"; fi'
    )


@catalog.action("restore-rules", "Restore rules", MANAGEMENT, "Restore firewall rules")
def restore_rules(r: FirewallRule) -> str:
    return (
        "if command -v iptables-restore >/dev/null 2>&1; then iptables-restore < /etc/iptables/rules.v4 2>/dev/null "
        '&& echo "✓ Rules restored" || echo "⚠️ Restore failed, root required"; '
        "elif command -v firewall-cmd >/dev/null 2>&1; then firewall-cmd --reload "
        '&& echo "✓ Rules reloaded"; else echo "⚠️ No firewall tool found"; fi'
    )


@catalog.action("block-source-ip", "Block source IP", MANAGEMENT, "Block source IP - {source}")
def block_source_ip(r: FirewallRule) -> str:
    return (
        f'if command -v iptables >/dev/null 2>&1; then echo "Block source: {r.source}"; '
        f'echo "Command: iptables -A INPUT -s {r.source} -j DROP"; echo "⚠️ Requires root"; '
        f"else {NO_IPTABLES}; fi"
    )


@catalog.action("block-dest-ip", "Block destination IP", MANAGEMENT, "Block destination IP - {destination}")
def block_dest_ip(r: FirewallRule) -> str:
    return (
        f'if command -v iptables >/dev/null 2>&1; then echo "Block destination: {r.destination}"; '
        f'echo "Command: iptables -A OUTPUT -d {r.destination} -j DROP"; echo "⚠️ Requires root"; '
        f"else {NO_IPTABLES}; fi"
    )


def _suggest(what: str, command: str) -> str:
    return (
        f'if command -v iptables >/dev/null 2>&1; then echo "{what}"; '
        f'echo "Command: {command}"; echo "⚠️ Requires root"; else {NO_IPTABLES}; fi'
    )


@catalog.action("allow-source-ip", "Allow source IP", MANAGEMENT, "Allow source IP - {source}")
def allow_source_ip(r: FirewallRule) -> str:
    return _suggest(f"Allow source: {r.source}", f"iptables -D INPUT -s {r.source} -j DROP")


@catalog.action("ip-whitelist", "Whitelist source IP", MANAGEMENT, "Whitelist - {source}")
def ip_whitelist(r: FirewallRule) -> str:
    return _suggest(f"Whitelist: {r.source}", f"iptables -I INPUT -s {r.source} -j ACCEPT")


def _port_command(r: FirewallRule, verb: str, target: str, firewalld: str, ufw: str) -> str:
    p = r.protocol
    return (
        f"port=$(echo \"{r.options}\" | grep -oP 'dpt:\\K[0-9]+' || echo unknown); "
        'if [ "$port" != "unknown" ]; then '
        f'if command -v iptables >/dev/null 2>&1; then echo "{verb} port: $port"; '
        f'echo "Command: iptables -A INPUT -p {p} --dport $port -j {target}"; echo "⚠️ Requires root"; '
        "elif command -v firewall-cmd >/dev/null 2>&1; then "
        f'echo "Command: firewall-cmd --{firewalld}=$port/{p} --permanent"; '
        'echo "⚠️ Requires root"; '
        f'elif command -v ufw >/dev/null 2>&1; then echo "Command: ufw {ufw} $port/{p}"; echo "⚠️ Requires root"; '
        'else echo "⚠️ No firewall tool found"; fi; '
        'else echo "⚠️ The rule names no destination port"; fi'
    )


@catalog.action("open-port", "Open port", MANAGEMENT, "Open port")
def open_port(r: FirewallRule) -> str:
    return _port_command(r, "Open", "ACCEPT", "add-port", "allow")


@catalog.action("close-port", "Close port", MANAGEMENT, "Close port")
def close_port(r: FirewallRule) -> str:
    return _port_command(r, "Close", "DROP", "remove-port", "deny")


@catalog.action("port-forward", "Port forwarding", MANAGEMENT, "Port forwarding")
def port_forward(r: FirewallRule) -> str:
    return (
        'echo "Port forwarding"; echo "⚠️ Requires root"; echo ""; echo "Example:"; '
        'echo "iptables -t nat -A PREROUTING -p tcp --dport 80 -j REDIRECT --to-port 8080"'
    )


@catalog.action("delete-rule", "Delete rule", MANAGEMENT, "Delete rule")
def delete_rule(r: FirewallRule) -> str:
    return f'echo "⚠️ Requires root"; echo ""; echo "Example: iptables -D {r.chain} <rule number>"'


@catalog.action("list-open-ports", "Open ports", SECURITY, "Open ports")
def list_open_ports(r: FirewallRule) -> str:
    return (
        "if command -v iptables >/dev/null 2>&1; then iptables -L INPUT -n | grep ACCEPT "
        "| grep -oP 'dpt:\\K[0-9]+' | sort -u; "
        "elif command -v firewall-cmd >/dev/null 2>&1; then firewall-cmd --list-ports; "
        "elif command -v ufw >/dev/null 2>&1; then ufw status | grep ALLOW; "
        'else echo "⚠️ No firewall tool found"; fi'
    )


@catalog.action("firewall-status", "Firewall status", SECURITY, "Firewall status")
def firewall_status(r: FirewallRule) -> str:
    return (
        'if command -v iptables >/dev/null 2>&1; then echo "=== iptables ==="; iptables -L -n | head -20; '
        'elif command -v firewall-cmd >/dev/null 2>&1; then firewall-cmd --state; firewall-cmd --get-active-zones; '
        "elif command -v ufw >/dev/null 2>&1; then ufw status; "
        'else echo "⚠️ No firewall tool found"; fi'
    )


@catalog.action("rule-statistics", "Rule statistics", SECURITY, "Rule statistics")
def rule_statistics(r: FirewallRule) -> str:
    return (
        'if command -v iptables >/dev/null 2>&1; then '
        "echo \"Total: $(iptables -L | grep -c '^Chain\\|^target')\"; echo \"\"; echo \"Per chain:\"; "
        "for chain in INPUT OUTPUT FORWARD; do "
        "echo \"$chain: $(iptables -L $chain -n | grep -c '^ACCEPT\\|^DROP\\|^REJECT')\"; done; "
        f"else {NO_IPTABLES}; fi"
    )


@catalog.action("test-rule", "Rule summary", SECURITY, "Rule summary")
def test_rule(r: FirewallRule) -> str:
    return (
        f'echo "Rule: {r.chain} {r.target} {r.protocol} {r.source} {r.destination}"; echo ""; '
        'echo "⚠️ A real test depends on the rule; test the matching traffic manually"'
    )


@catalog.action("recent-logs", "Firewall log", LOGS, "Firewall log")
def recent_logs(r: FirewallRule) -> str:
    return (
        "journalctl -u firewalld -n 50 2>/dev/null || journalctl | grep -i firewall | tail -50 2>/dev/null "
        '|| grep -i firewall /var/log/syslog | tail -50 2>/dev/null || echo "⚠️ Cannot read logs"'
    )


def _policy(target: str) -> str:
    commands = "; ".join(f'echo "iptables -P {chain} {target}"' for chain in ("INPUT", "OUTPUT", "FORWARD"))
    return (
        f'echo "Set default policy to {target}"; echo ""; echo "Commands:"; '
        f'{commands}; echo ""; echo "⚠️ Requires root"'
    )


@catalog.action("set-drop-policy", "Default DROP policy", SECURITY, "Default DROP policy")
def set_drop_policy(r: FirewallRule) -> str:
    return _policy("DROP")


@catalog.action("set-accept-policy", "Default ACCEPT policy", SECURITY, "Default ACCEPT policy")
def set_accept_policy(r: FirewallRule) -> str:
    return _policy("ACCEPT")


@catalog.action("rate-limit", "Rate limiting", SECURITY, "Rate limiting")
def rate_limit(r: FirewallRule) -> str:
    return (
        'echo "Rate limiting example"; echo ""; '
        'echo "iptables -A INPUT -p tcp --dport 80 -m limit --limit 25/minute --limit-burst 100 -j ACCEPT"; '
        'echo ""; echo "⚠️ Requires root"'
    )


@catalog.action("refresh", "Refresh rules", INFO, "Refresh rule list")
def refresh(r: FirewallRule) -> str:
    return list_all_rules(r)
