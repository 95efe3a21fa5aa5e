"""
Unit tests for the Catalog Module.

Tests cover:
- Builder purity and coverage across every entity kind
- Exact command text for representative actions
- Titles, categories and action modes
- Unknown actions, duplicate registration and entity validation
"""

import json
import os
import sys

import pytest
from pydantic import ValidationError

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irconsole.modules.catalog import (
    CATALOGS,
    ActionCategory,
    ActionMode,
    Catalog,
    CronJob,
    EntityKind,
    FirewallRule,
    NetworkConnection,
    Process,
    Service,
    StartupItem,
    User,
    extract_ip,
    extract_port,
    get_catalog,
)
from irconsole.modules.errors import UnknownAction


# =============================================================================
# Fixtures
# =============================================================================


SAMPLE_ENTITIES = {
    EntityKind.PROCESS: Process(pid="1234"),
    EntityKind.NETWORK: NetworkConnection(
        protocol="tcp",
        local="10.0.0.5:22",
        foreign="203.0.113.7:51234",
        state="ESTABLISHED",
        pid="812",
        process="sshd",
    ),
    EntityKind.SERVICE: Service(name="nginx"),
    EntityKind.USER: User(username="alice"),
    EntityKind.CRON: CronJob(user="root", schedule="*/5 * * * *", command="/usr/local/bin/backup.sh --full"),
    EntityKind.FIREWALL: FirewallRule(
        chain="INPUT", target="DROP", protocol="tcp", source="198.51.100.0/24", destination="0.0.0.0/0"
    ),
    EntityKind.STARTUP: StartupItem(
        name="sshd.service", type="systemd", path="/lib/systemd/system/sshd.service", command="/usr/sbin/sshd -D"
    ),
}


# =============================================================================
# Coverage and Purity
# =============================================================================


class TestCatalogCoverage:
    """Every kind has a populated, pure action table."""

    def test_every_kind_has_a_catalog(self):
        assert set(CATALOGS) == set(EntityKind)

    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_info_and_security_actions_present(self, kind):
        catalog = get_catalog(kind)

        assert catalog.actions(ActionCategory.INFO)
        assert catalog.actions(ActionCategory.SECURITY_CHECK)

    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_builders_are_deterministic(self, kind):
        """Same entity, same string, for every action of the kind."""
        entity = SAMPLE_ENTITIES[kind]
        for descriptor in get_catalog(kind).actions():
            first = descriptor.build(entity)
            second = descriptor.build(entity)

            assert isinstance(first, str)
            assert first == second

    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_titles_render_for_every_action(self, kind):
        entity = SAMPLE_ENTITIES[kind]
        for descriptor in get_catalog(kind).actions():
            title = descriptor.title(entity)
            assert title
            assert "{" not in title

    def test_get_catalog_accepts_strings(self):
        assert get_catalog("service") is CATALOGS[EntityKind.SERVICE]

    def test_get_catalog_unknown_kind(self):
        with pytest.raises(ValueError):
            get_catalog("printer")


# =============================================================================
# Command Text
# =============================================================================


class TestCommandText:
    """Exact templates for representative actions."""

    def test_process_cmdline(self):
        descriptor = get_catalog(EntityKind.PROCESS).lookup("cmdline")

        assert descriptor.build(Process(pid="1234")) == "cat /proc/1234/cmdline | tr '\\0' ' '"
        assert descriptor.title(Process(pid="1234")) == "Process 1234 - Command line"

    def test_fields_are_interpolated_unescaped(self):
        """Shell metacharacters pass through as-is."""
        descriptor = get_catalog(EntityKind.SERVICE).lookup("status")

        command = descriptor.build(Service(name="x; id"))

        assert command.startswith("systemctl status x; id ")

    def test_network_title_uses_foreign_ip(self):
        connection = SAMPLE_ENTITIES[EntityKind.NETWORK]
        descriptor = get_catalog(EntityKind.NETWORK).lookup("whois")

        assert descriptor.title(connection) == "WHOIS - 203.0.113.7"
        assert descriptor.build(connection).startswith("whois 203.0.113.7 ")

    def test_cron_title_shortens_command(self):
        job = SAMPLE_ENTITIES[EntityKind.CRON]
        descriptor = get_catalog(EntityKind.CRON).lookup("command")

        assert descriptor.title(job) == "Command - /usr/local/bin/backup.sh --full..."

    def test_startup_systemd_branch(self):
        catalog = get_catalog(EntityKind.STARTUP)
        systemd_item = SAMPLE_ENTITIES[EntityKind.STARTUP]
        rc_item = StartupItem(name="custom", type="rc.local", path="/etc/rc.local", command="/opt/run.sh")

        assert "systemctl enable sshd.service" in catalog.lookup("enable").build(systemd_item)
        assert "systemctl" not in catalog.lookup("enable").build(rc_item)
        assert catalog.lookup("run-now").build(rc_item) == "/opt/run.sh 2>&1 &"


# =============================================================================
# Modes, Categories, Lookup
# =============================================================================


class TestLookup:
    def test_unknown_action_is_a_value_not_an_exception(self):
        result = get_catalog(EntityKind.USER).lookup("format-disk")

        assert isinstance(result, UnknownAction)
        assert result.message == "Unknown action: format-disk (for user)"

    def test_local_and_clipboard_modes(self):
        network = get_catalog(EntityKind.NETWORK)
        firewall = get_catalog(EntityKind.FIREWALL)

        assert network.lookup("connection-details").mode is ActionMode.LOCAL
        assert firewall.lookup("rule-details").mode is ActionMode.LOCAL
        assert network.lookup("copy-foreign").mode is ActionMode.CLIPBOARD
        assert network.lookup("ping").mode is ActionMode.REMOTE

    def test_local_action_renders_snapshot(self):
        text = get_catalog(EntityKind.FIREWALL).lookup("rule-details").build(SAMPLE_ENTITIES[EntityKind.FIREWALL])

        assert "Chain: INPUT" in text
        assert "Source: 198.51.100.0/24" in text

    def test_category_filter(self):
        catalog = get_catalog(EntityKind.NETWORK)
        diagnostics = catalog.actions(ActionCategory.NETWORK_DIAGNOSTICS)

        assert {a.key for a in diagnostics} >= {"ping", "traceroute"}
        assert all(a.category is ActionCategory.NETWORK_DIAGNOSTICS for a in diagnostics)

    def test_to_dict(self):
        data = get_catalog(EntityKind.PROCESS).lookup("kill").to_dict()

        assert data == {"key": "kill", "label": data["label"], "category": "management", "mode": "remote"}

    def test_duplicate_key_rejected(self):
        catalog = Catalog(EntityKind.SERVICE)

        @catalog.action("status", "Status", ActionCategory.INFO, "Status")
        def first(s):
            return "a"

        with pytest.raises(ValueError):

            @catalog.action("status", "Status again", ActionCategory.INFO, "Status")
            def second(s):
                return "b"

        assert len(catalog) == 1
        assert "status" in catalog


# =============================================================================
# Full Action Tables
# =============================================================================


FULL_TABLES = {
    EntityKind.PROCESS: {
        "threads", "maps", "smaps", "io", "stack", "syscalls", "cgroup", "container", "hidden-process",
        "suspicious-network", "cpu", "cpu-usage", "fd-stats", "signals", "scheduler", "context-switches",
        "children", "dns", "netstat", "uptime",
    },
    EntityKind.NETWORK: {
        "threat-intel", "allow-ip", "temp-block", "tcp-test", "ip-type", "port-service", "firewall-rules",
        "anomaly-detect", "access-log",
    },
    EntityKind.SERVICE: {
        "cpu-usage", "memory-usage", "live-logs", "permissions", "process-list", "reverse-dependencies",
        "service-tree", "timer", "edit-service",
    },
    EntityKind.USER: {
        "abnormal-login", "disable-ssh", "disk-usage", "group-membership", "home-dir", "last-login",
        "open-files", "ssh-config", "suspicious-files", "user-status",
    },
    EntityKind.CRON: {"error-logs", "export", "frequency", "next-run", "parse-cron"},
    EntityKind.FIREWALL: {
        "allow-source-ip", "close-port", "open-port", "port-forward", "rate-limit", "ip-whitelist",
        "restore-rules", "rule-statistics", "set-accept-policy", "set-drop-policy", "copy-destination",
    },
    EntityKind.STARTUP: {
        "backup", "boot-order", "command", "config-location", "delay-start", "resource-usage", "startup-type",
    },
}


class TestFullActionTables:
    """Each kind offers the whole diagnostic menu, not a subset."""

    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_menu_entries_registered(self, kind):
        catalog = get_catalog(kind)

        assert FULL_TABLES[kind] <= {a.key for a in catalog.actions()}

    def test_process_thread_count(self):
        command = get_catalog(EntityKind.PROCESS).lookup("threads").build(Process(pid="1234"))

        assert command.startswith("ls /proc/1234/task ")

    def test_network_ip_type_targets_foreign_address(self):
        connection = SAMPLE_ENTITIES[EntityKind.NETWORK]
        descriptor = get_catalog(EntityKind.NETWORK).lookup("ip-type")

        assert descriptor.title(connection) == "IP type - 203.0.113.7"
        assert "203.0.113.7" in descriptor.build(connection)

    def test_service_live_logs_are_bounded(self):
        command = get_catalog(EntityKind.SERVICE).lookup("live-logs").build(Service(name="nginx"))

        assert command.startswith("timeout 10 journalctl -u nginx ")

    def test_firewall_copy_destination(self):
        descriptor = get_catalog(EntityKind.FIREWALL).lookup("copy-destination")

        assert descriptor.mode is ActionMode.CLIPBOARD
        assert descriptor.build(SAMPLE_ENTITIES[EntityKind.FIREWALL]) == "0.0.0.0/0"

    def test_firewall_open_port_reads_rule_options(self):
        rule = FirewallRule(
            chain="INPUT", target="ACCEPT", protocol="tcp", source="0.0.0.0/0", destination="0.0.0.0/0",
            options="tcp dpt:8443",
        )

        command = get_catalog(EntityKind.FIREWALL).lookup("open-port").build(rule)

        assert command.startswith('port=$(echo "tcp dpt:8443" | grep -oP \'dpt:\\K[0-9]+\'')
        assert "iptables -A INPUT -p tcp --dport $port -j ACCEPT" in command

    def test_firewall_drop_policy_covers_every_chain(self):
        descriptor = get_catalog(EntityKind.FIREWALL).lookup("set-drop-policy")

        command = descriptor.build(SAMPLE_ENTITIES[EntityKind.FIREWALL])

        for chain in ("INPUT", "OUTPUT", "FORWARD"):
            assert f"iptables -P {chain} DROP" in command

    def test_cron_export_is_json(self):
        descriptor = get_catalog(EntityKind.CRON).lookup("export")

        assert descriptor.mode is ActionMode.LOCAL
        assert json.loads(descriptor.build(SAMPLE_ENTITIES[EntityKind.CRON])) == {
            "user": "root",
            "schedule": "*/5 * * * *",
            "command": "/usr/local/bin/backup.sh --full",
        }

    def test_cron_parse_splits_fields(self):
        command = get_catalog(EntityKind.CRON).lookup("parse-cron").build(SAMPLE_ENTITIES[EntityKind.CRON])

        assert "awk '{print \"Minute: \"$1" in command
        assert command.endswith("Sunday)\"}';; esac")

    def test_startup_type_is_rendered_locally(self):
        catalog = get_catalog(EntityKind.STARTUP)
        rc_item = StartupItem(name="custom", type="rc.local", path="/etc/rc.local", command="/opt/run.sh")

        assert catalog.lookup("startup-type").mode is ActionMode.LOCAL
        assert "/etc/rc.local" in catalog.lookup("startup-type").build(rc_item)
        assert "systemd-analyze" not in catalog.lookup("boot-order").build(rc_item)


# =============================================================================
# Entities and Address Helpers
# =============================================================================


class TestEntities:
    def test_numeric_pid_is_coerced(self):
        assert Process(pid=1234).pid == "1234"

    def test_snapshots_are_frozen(self):
        process = Process(pid="1")
        with pytest.raises(ValidationError):
            process.pid = "2"

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            Service(name="nginx", unit="nginx.service")

    def test_empty_pid_rejected(self):
        with pytest.raises(ValidationError):
            Process(pid="")


class TestAddressHelpers:
    @pytest.mark.parametrize(
        "address,ip,port",
        [
            ("192.168.1.5:443", "192.168.1.5", "443"),
            ("[::1]:8080", "::1", "8080"),
            ("0.0.0.0:*", "0.0.0.0", "*"),
            ("localhost", "localhost", ""),
        ],
    )
    def test_extract(self, address, ip, port):
        assert extract_ip(address) == ip
        assert extract_port(address) == port
