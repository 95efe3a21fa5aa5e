"""
irconsole - Incident-Response Console

Run diagnostic actions against processes, sockets, services, accounts,
cron jobs, firewall rules and startup items on a remote host, and stream
an AI explanation of the result.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- All communication through defined interfaces

Modules:
- catalog: Entity snapshots and per-kind command templates
- accounts: Execution account selection
- gateway: Remote command execution
- explain: Streaming AI explanations
- controller: Per-entity modal state machine
- config: Service configuration and prompts
- api: HTTP models
"""

__version__ = "1.0.0"
