"""Network connection actions."""

from typing import Any, Dict

from irconsole.modules.catalog.catalog import ActionCategory, ActionMode, Catalog
from irconsole.modules.catalog.entities import EntityKind, NetworkConnection

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
DIAG = ActionCategory.NETWORK_DIAGNOSTICS
LOGS = ActionCategory.LOG_QUERY


def extract_ip(address: str) -> str:
    """Host part of ``ip:port``; handles bracketed IPv6 (``[::1]:8080``)."""
    if "[" in address:
        start = address.find("[") + 1
        end = address.find("]", start)
        return address[start:end] if end != -1 else address
    return address.split(":")[0]


def extract_port(address: str) -> str:
    parts = address.split(":")
    return parts[-1] if len(parts) > 1 else ""


def _fields(c: NetworkConnection) -> Dict[str, Any]:
    values = c.model_dump()
    values.update(
        foreign_ip=extract_ip(c.foreign),
        foreign_port=extract_port(c.foreign),
        local_port=extract_port(c.local),
    )
    return values


catalog = Catalog(EntityKind.NETWORK, fields=_fields)


@catalog.action("connection-details", "Connection details", INFO, "Connection details", mode=ActionMode.LOCAL)
def connection_details(c: NetworkConnection) -> str:
    return (
        f"Protocol: {c.protocol}\nLocal address: {c.local}\nForeign address: {c.foreign}\n"
        f"State: {c.state}\nPID: {c.pid}\nProcess: {c.process}"
    )


@catalog.action("copy-local", "Copy local address", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_local(c: NetworkConnection) -> str:
    return c.local


@catalog.action("copy-foreign", "Copy foreign address", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_foreign(c: NetworkConnection) -> str:
    return c.foreign


@catalog.action("copy-process", "Copy process", INFO, "Copied", mode=ActionMode.CLIPBOARD)
def copy_process(c: NetworkConnection) -> str:
    return c.process


@catalog.action("whois", "WHOIS lookup", INFO, "WHOIS - {foreign_ip}")
def whois(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return f'whois {ip} 2>/dev/null || echo "whois is not installed (apt install whois / yum install whois)"'


@catalog.action("geolocation", "Geolocation", INFO, "Geolocation - {foreign_ip}")
def geolocation(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return f'curl -s "http://ip-api.com/json/{ip}" 2>/dev/null || echo "Geolocation lookup failed"'


@catalog.action("reverse-dns", "Reverse DNS", INFO, "Reverse DNS - {foreign_ip}")
def reverse_dns(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'dig -x {ip} +short 2>/dev/null || nslookup {ip} 2>/dev/null | grep "name =" '
        '|| echo "Reverse DNS lookup failed"'
    )


@catalog.action("ip-type", "Classify IP", INFO, "IP type - {foreign_ip}")
def ip_type(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "IP address: {ip}"; echo ""; '
        f'if [[ "{ip}" =~ ^10\\. ]] || [[ "{ip}" =~ ^172\\.(1[6-9]|2[0-9]|3[01])\\. ]] '
        f'|| [[ "{ip}" =~ ^192\\.168\\. ]]; then echo "✓ Private address"; '
        f'elif [[ "{ip}" =~ ^127\\. ]]; then echo "✓ Loopback address"; '
        f'elif [[ "{ip}" =~ ^169\\.254\\. ]]; then echo "✓ Link-local address"; '
        f'elif [[ "{ip}" =~ ^224\\. ]] || [[ "{ip}" =~ ^239\\. ]]; then echo "✓ Multicast address"; '
        'else echo "✓ Public address"; fi'
    )


@catalog.action("port-service", "Identify port service", INFO, "Port service - {foreign_port}")
def port_service(c: NetworkConnection) -> str:
    port = extract_port(c.foreign)
    return (
        f'echo "Port: {port}"; echo ""; '
        f'grep -w {port} /etc/services 2>/dev/null | head -5 || echo "No standard service entry"; echo ""; '
        f"case {port} in "
        '80) echo "HTTP";; 443) echo "HTTPS";; 22) echo "SSH";; 21) echo "FTP";; 25) echo "SMTP";; '
        '3306) echo "MySQL";; 5432) echo "PostgreSQL";; 6379) echo "Redis";; 27017) echo "MongoDB";; '
        '3389) echo "RDP";; *) echo "Unknown service";; esac'
    )


@catalog.action("port-process", "Process owning local port", INFO, "Port owner - {local_port}")
def port_process(c: NetworkConnection) -> str:
    port = extract_port(c.local)
    return (
        f'lsof -nP -i :{port} 2>/dev/null || ss -tlnp | grep ":{port}" 2>/dev/null '
        '|| echo "Cannot resolve the owning process"'
    )


@catalog.action("port-test", "Port reachability", DIAG, "Port test - {foreign_ip}:{foreign_port}")
def port_test(c: NetworkConnection) -> str:
    ip, port = extract_ip(c.foreign), extract_port(c.foreign)
    return (
        f'timeout 3 bash -c "echo > /dev/tcp/{ip}/{port}" 2>/dev/null '
        f'&& echo "✓ Port {port} is reachable" || echo "✗ Port {port} is unreachable or timed out"'
    )


@catalog.action("ping", "Ping", DIAG, "Ping - {foreign_ip}")
def ping(c: NetworkConnection) -> str:
    return f'ping -c 4 {extract_ip(c.foreign)} 2>/dev/null || echo "Ping failed or not permitted"'


@catalog.action("traceroute", "Traceroute", DIAG, "Traceroute - {foreign_ip}")
def traceroute(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f"traceroute -m 15 {ip} 2>/dev/null || tracepath {ip} 2>/dev/null "
        '|| echo "traceroute is not available"'
    )


@catalog.action("latency", "Latency", DIAG, "Latency - {foreign_ip}")
def latency(c: NetworkConnection) -> str:
    return (
        f"ping -c 10 {extract_ip(c.foreign)} 2>/dev/null | tail -1 | "
        "awk -F'/' '{print \"Average latency: \"$5\" ms\"}' || echo \"Latency test failed\""
    )


@catalog.action("tcp-test", "TCP handshake test", DIAG, "TCP test - {foreign_ip}:{foreign_port}")
def tcp_test(c: NetworkConnection) -> str:
    ip, port = extract_ip(c.foreign), extract_port(c.foreign)
    return (
        f"timeout 5 bash -c \"echo -e 'GET / HTTP/1.0\\r\\n\\r\\n' > /dev/tcp/{ip}/{port}\" 2>/dev/null "
        '&& echo "✓ TCP connection succeeded" || echo "✗ TCP connection failed"'
    )


@catalog.action("threat-intel", "Threat intelligence", SECURITY, "Threat intelligence - {foreign_ip}")
def threat_intel(c: NetworkConnection) -> str:
    ip, port = extract_ip(c.foreign), extract_port(c.foreign)
    return (
        f'echo "Threat intelligence - {ip}"; echo ""; '
        'echo "⚠️ Automated lookups need an API key. Check the address manually:"; '
        'echo "1. VirusTotal: https://www.virustotal.com/"; '
        'echo "2. AbuseIPDB: https://www.abuseipdb.com/"; '
        'echo "3. IPVoid: https://www.ipvoid.com/"; echo ""; '
        f'echo "IP: {ip}"; echo "Port: {port}"; echo "Protocol: {c.protocol}"'
    )


@catalog.action("blacklist-check", "Blacklist check", SECURITY, "Blacklist check - {foreign_ip}")
def blacklist_check(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "Blacklist check - {ip}"; echo ""; '
        f'host {ip}.zen.spamhaus.org 2>/dev/null && echo "⚠️ Listed by Spamhaus" || echo "✓ Not listed by Spamhaus"; '
        f'host {ip}.dnsbl.sorbs.net 2>/dev/null && echo "⚠️ Listed by SORBS" || echo "✓ Not listed by SORBS"'
    )


@catalog.action("anomaly-detect", "Anomaly check", SECURITY, "Anomaly check - {foreign_ip}:{foreign_port}")
def anomaly_detect(c: NetworkConnection) -> str:
    ip, port = extract_ip(c.foreign), extract_port(c.foreign)
    return (
        f'echo "Anomaly check - {ip}:{port}"; echo ""; '
        f'if [ {port} -lt 1024 ]; then echo "⚠️ Privileged port (<1024)"; else echo "✓ Unprivileged port"; fi; '
        f'case {port} in 22|80|443|3306|5432|6379|27017) echo "✓ Common service port";; '
        '*) echo "⚠️ Uncommon port, worth a closer look";; esac; '
        f'echo "State: {c.state}"; echo "Process: {c.process}"'
    )


@catalog.action("connection-freq", "Connection frequency", SECURITY, "Connection frequency - {foreign_ip}")
def connection_freq(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "Current connections:"; ss -tn | grep "{ip}" | wc -l; echo ""; '
        f'echo "All connections:"; ss -tn | grep "{ip}" | head -20'
    )


@catalog.action("block-ip", "Block IP", MANAGEMENT, "Block IP - {foreign_ip}")
def block_ip(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "Block IP: {ip}"; echo ""; if command -v iptables >/dev/null 2>&1; then '
        f'echo "Command: iptables -A INPUT -s {ip} -j DROP"; echo "⚠️ Requires root"; '
        'else echo "⚠️ iptables is not available"; fi'
    )


@catalog.action("allow-ip", "Unblock IP", MANAGEMENT, "Unblock IP - {foreign_ip}")
def allow_ip(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "Unblock IP: {ip}"; echo ""; if command -v iptables >/dev/null 2>&1; then '
        f'echo "Command: iptables -D INPUT -s {ip} -j DROP"; echo "⚠️ Requires root"; '
        'else echo "⚠️ iptables is not available"; fi'
    )


@catalog.action("firewall-rules", "Matching firewall rules", MANAGEMENT, "Firewall rules - {foreign_ip}")
def firewall_rules(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        'if command -v iptables >/dev/null 2>&1; then '
        f'echo "=== iptables ==="; iptables -L -n | grep "{ip}" || echo "No matching rules"; '
        'elif command -v firewall-cmd >/dev/null 2>&1; then echo "=== firewalld ==="; firewall-cmd --list-all; '
        'else echo "⚠️ No firewall tool available"; fi'
    )


@catalog.action("temp-block", "Block IP for 5 minutes", MANAGEMENT, "Temporary block - {foreign_ip}")
def temp_block(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "Temporary block (5 minutes): {ip}"; echo ""; '
        f"echo \"Command: sudo bash -c 'iptables -A INPUT -s {ip} -j DROP && sleep 300 && "
        f"iptables -D INPUT -s {ip} -j DROP &'\"; "
        'echo "⚠️ Requires root"'
    )


@catalog.action("disconnect", "Disconnect", MANAGEMENT, "Disconnect - {foreign_ip}:{foreign_port}")
def disconnect(c: NetworkConnection) -> str:
    ip, port = extract_ip(c.foreign), extract_port(c.foreign)
    return (
        f"ss -K dst {ip} dport = {port} 2>/dev/null && echo \"✓ Connection closed\" "
        '|| echo "⚠️ Could not close the connection (root or ss -K support required)"'
    )


@catalog.action("connection-history", "Connection history", LOGS, "Connection history - {foreign_ip}")
def connection_history(c: NetworkConnection) -> str:
    return f'journalctl -n 100 | grep "{extract_ip(c.foreign)}" || echo "No connection history"'


@catalog.action("access-log", "Web access log", LOGS, "Access log - {foreign_ip}")
def access_log(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "=== Nginx ==="; grep "{ip}" /var/log/nginx/access.log 2>/dev/null | tail -20 '
        '|| echo "No Nginx log entries"; echo ""; '
        f'echo "=== Apache ==="; grep "{ip}" /var/log/apache2/access.log 2>/dev/null | tail -20 '
        f'|| grep "{ip}" /var/log/httpd/access_log 2>/dev/null | tail -20 || echo "No Apache log entries"'
    )


@catalog.action("security-log", "Security log", LOGS, "Security log - {foreign_ip}")
def security_log(c: NetworkConnection) -> str:
    ip = extract_ip(c.foreign)
    return (
        f'echo "=== Auth log ==="; grep "{ip}" /var/log/auth.log 2>/dev/null | tail -20 '
        f'|| grep "{ip}" /var/log/secure 2>/dev/null | tail -20 || echo "No auth log entries"; echo ""; '
        f'echo "=== System log ==="; journalctl -n 50 | grep "{ip}" || echo "No system log entries"'
    )


@catalog.action("refresh", "Refresh connection", INFO, "Connection state - {foreign_ip}")
def refresh(c: NetworkConnection) -> str:
    return f'ss -tunap | grep "{extract_ip(c.foreign)}" || echo "No matching connections"'
