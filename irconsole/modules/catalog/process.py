"""Process actions, keyed off /proc/<pid>."""

from irconsole.modules.catalog.catalog import ActionCategory, Catalog
from irconsole.modules.catalog.entities import EntityKind, Process

INFO = ActionCategory.INFO
MANAGEMENT = ActionCategory.MANAGEMENT
SECURITY = ActionCategory.SECURITY_CHECK
NETWORK = ActionCategory.NETWORK_DIAGNOSTICS

NA = 'echo "Not accessible"'

catalog = Catalog(EntityKind.PROCESS)


@catalog.action("cmdline", "View command line", INFO, "Process {pid} - Command line")
def cmdline(p: Process) -> str:
    return f"cat /proc/{p.pid}/cmdline | tr '\\0' ' '"


@catalog.action("exe", "View executable path", INFO, "Process {pid} - Executable path")
def exe(p: Process) -> str:
    return f"ls -l /proc/{p.pid}/exe 2>/dev/null || {NA}"


@catalog.action("cwd", "View working directory", INFO, "Process {pid} - Working directory")
def cwd(p: Process) -> str:
    return f"ls -l /proc/{p.pid}/cwd 2>/dev/null || {NA}"


@catalog.action("status", "View status and permissions", INFO, "Process {pid} - Status")
def status(p: Process) -> str:
    return f"cat /proc/{p.pid}/status 2>/dev/null || {NA}"


@catalog.action("capabilities", "View capabilities", INFO, "Process {pid} - Capabilities")
def capabilities(p: Process) -> str:
    return f"grep Cap /proc/{p.pid}/status 2>/dev/null || {NA}"


@catalog.action("uid", "View UID/GID", INFO, "Process {pid} - UID/GID")
def uid(p: Process) -> str:
    return f'grep -E "^(Uid|Gid|Groups):" /proc/{p.pid}/status 2>/dev/null || {NA}'


@catalog.action("fd", "List open files", INFO, "Process {pid} - Open files (first 100)")
def fd(p: Process) -> str:
    return f"ls -l /proc/{p.pid}/fd 2>/dev/null | head -100 || {NA}"


@catalog.action("maps", "View memory maps", INFO, "Process {pid} - Memory maps (first 100 lines)")
def maps(p: Process) -> str:
    return f"cat /proc/{p.pid}/maps 2>/dev/null | head -100 || {NA}"


@catalog.action("limits", "View resource limits", INFO, "Process {pid} - Resource limits")
def limits(p: Process) -> str:
    return f"cat /proc/{p.pid}/limits 2>/dev/null || {NA}"


@catalog.action("network", "View network connections", NETWORK, "Process {pid} - Network connections")
def network(p: Process) -> str:
    return (
        f"lsof -nP -i -a -p {p.pid} 2>/dev/null || "
        f'(ss -tnp 2>/dev/null | grep "pid={p.pid}"; ss -unp 2>/dev/null | grep "pid={p.pid}") || '
        f'echo "No connections or insufficient permissions"'
    )


@catalog.action("ports", "View listening ports", NETWORK, "Process {pid} - Listening ports")
def ports(p: Process) -> str:
    return (
        f"lsof -nP -i -a -p {p.pid} 2>/dev/null | grep LISTEN || "
        f'ss -tlnp 2>/dev/null | grep "pid={p.pid}" || '
        f'ss -ulnp 2>/dev/null | grep "pid={p.pid}" || '
        f'echo "No listening ports or insufficient permissions"'
    )


@catalog.action("netstat", "View detailed network state", NETWORK, "Process {pid} - Detailed network state")
def netstat(p: Process) -> str:
    return (
        'echo "=== TCP connections ==="; '
        f'lsof -nP -i TCP -a -p {p.pid} 2>/dev/null || ss -tnp 2>/dev/null | grep "pid={p.pid}" '
        '|| echo "No TCP connections"; echo ""; '
        'echo "=== UDP connections ==="; '
        f'lsof -nP -i UDP -a -p {p.pid} 2>/dev/null || ss -unp 2>/dev/null | grep "pid={p.pid}" '
        '|| echo "No UDP connections"; echo ""; '
        'echo "=== Socket file descriptors ==="; '
        f'ls -l /proc/{p.pid}/fd 2>/dev/null | grep socket || echo "No socket descriptors"'
    )


@catalog.action("dns", "View DNS activity", NETWORK, "Process {pid} - DNS activity")
def dns(p: Process) -> str:
    return f'lsof -p {p.pid} 2>/dev/null | grep -i dns || echo "No DNS activity"'


@catalog.action("pstree", "View process tree", INFO, "Process {pid} - Process tree")
def pstree(p: Process) -> str:
    return f'pstree -p {p.pid} 2>/dev/null || echo "pstree is not available"'


@catalog.action("children", "List child processes", INFO, "Process {pid} - Child processes")
def children(p: Process) -> str:
    return f'ls /proc/{p.pid}/task/*/children 2>/dev/null | xargs cat 2>/dev/null || echo "No child processes"'


@catalog.action("parent", "View parent process", INFO, "Process {pid} - Parent process")
def parent(p: Process) -> str:
    return (
        f"cat /proc/{p.pid}/status 2>/dev/null | grep PPid | awk '{{print $2}}' | "
        f'xargs -I {{}} ps -p {{}} -o pid,user,cmd 2>/dev/null || echo "Cannot resolve parent process"'
    )


@catalog.action("io", "View I/O statistics", INFO, "Process {pid} - I/O statistics")
def io(p: Process) -> str:
    return f"cat /proc/{p.pid}/io 2>/dev/null || {NA}"


@catalog.action("threads", "Count threads", INFO, "Process {pid} - Thread count")
def threads(p: Process) -> str:
    return f"ls /proc/{p.pid}/task 2>/dev/null | wc -l || {NA}"


@catalog.action("memory", "View memory usage", INFO, "Process {pid} - Memory usage")
def memory(p: Process) -> str:
    return f'cat /proc/{p.pid}/status 2>/dev/null | grep -E "^Vm" || {NA}'


@catalog.action("cpu", "View CPU affinity", INFO, "Process {pid} - CPU affinity")
def cpu(p: Process) -> str:
    return f'taskset -cp {p.pid} 2>/dev/null || echo "Cannot read CPU affinity"'


@catalog.action("stack", "View kernel stack", INFO, "Process {pid} - Kernel stack")
def stack(p: Process) -> str:
    return f"cat /proc/{p.pid}/stack 2>/dev/null || {NA}"


@catalog.action("environ", "View environment", INFO, "Process {pid} - Environment variables")
def environ(p: Process) -> str:
    return f"cat /proc/{p.pid}/environ 2>/dev/null | tr '\\0' '\\n' || {NA}"


@catalog.action("smaps", "View detailed memory", INFO, "Process {pid} - Detailed memory (first 200 lines)")
def smaps(p: Process) -> str:
    return f"cat /proc/{p.pid}/smaps 2>/dev/null | head -200 || {NA}"


@catalog.action("cpu-usage", "Sample CPU usage", INFO, "Process {pid} - CPU usage")
def cpu_usage(p: Process) -> str:
    return (
        'echo "=== CPU usage ==="; '
        f"ps -p {p.pid} -o pid,ppid,%cpu,%mem,vsz,rss,tty,stat,start,time,cmd 2>/dev/null "
        '|| echo "Cannot read process"; echo ""; '
        'echo "=== Live CPU usage (5 second sample) ==="; '
        f"for i in {{1..5}}; do ps -p {p.pid} -o %cpu --no-headers 2>/dev/null && sleep 1; done | "
        "awk '{sum+=$1; count++} END {if(count>0) print \"Average CPU: \" sum/count \"%\"; "
        "else print \"Process has exited\"}'"
    )


@catalog.action("context-switches", "View context switches", INFO, "Process {pid} - Context switches")
def context_switches(p: Process) -> str:
    return (
        'echo "=== Context switches ==="; '
        f'grep -E "^(voluntary_ctxt_switches|nonvoluntary_ctxt_switches):" /proc/{p.pid}/status 2>/dev/null '
        f"|| {NA}; echo \"\"; "
        'echo "voluntary: the process gave up the CPU"; '
        'echo "nonvoluntary: the scheduler preempted the process"'
    )


@catalog.action("oom-score", "View OOM score", INFO, "Process {pid} - OOM score")
def oom_score(p: Process) -> str:
    return (
        'echo "=== OOM score ==="; '
        f"echo \"OOM Score: $(cat /proc/{p.pid}/oom_score 2>/dev/null || echo 'n/a')\"; "
        f"echo \"OOM Score Adj: $(cat /proc/{p.pid}/oom_score_adj 2>/dev/null || echo 'n/a')\"; "
        f"echo \"OOM Adj: $(cat /proc/{p.pid}/oom_adj 2>/dev/null || echo 'n/a')\"; echo \"\"; "
        f"echo \"Likelihood of being OOM-killed: $(cat /proc/{p.pid}/oom_score 2>/dev/null | "
        "awk '{if($1<100) print \"low\"; else if($1<500) print \"medium\"; else print \"high\"}' "
        "|| echo 'unknown')\""
    )


@catalog.action("scheduler", "View scheduling policy", INFO, "Process {pid} - Scheduling policy")
def scheduler(p: Process) -> str:
    return (
        'echo "=== Scheduling policy and priority ==="; '
        f"cat /proc/{p.pid}/stat 2>/dev/null | awk '{{print \"Policy: \" $41; print \"Priority: \" $18; "
        f"print \"Nice: \" $19; print \"RT priority: \" $40}}' || {NA}; echo \"\"; "
        f"ps -p {p.pid} -o pid,pri,ni,rtprio,sched,stat,wchan:20,cmd 2>/dev/null "
        '|| echo "Cannot read process"'
    )


@catalog.action("syscalls", "Sample system calls", INFO, "Process {pid} - System call summary")
def syscalls(p: Process) -> str:
    return (
        'echo "=== System calls (5 second sample) ==="; '
        f"timeout 5 strace -c -p {p.pid} 2>&1 | tail -20 "
        '|| echo "⚠️ Requires root or strace is not installed"'
    )


@catalog.action("signals", "View signal handling", INFO, "Process {pid} - Signal handling")
def signals(p: Process) -> str:
    return (
        'echo "=== Signal masks ==="; '
        f'grep -E "^(Sig|Shd):" /proc/{p.pid}/status 2>/dev/null || {NA}; echo ""; '
        'echo "SigPnd/ShdPnd: pending  SigBlk: blocked  SigIgn: ignored  SigCgt: caught"'
    )


@catalog.action("namespaces", "View namespaces", SECURITY, "Process {pid} - Namespaces")
def namespaces(p: Process) -> str:
    return f'echo "=== Namespaces ==="; ls -l /proc/{p.pid}/ns/ 2>/dev/null || {NA}'


@catalog.action("cgroup", "View cgroup limits", SECURITY, "Process {pid} - Cgroup")
def cgroup(p: Process) -> str:
    return (
        f'echo "=== Cgroup ==="; cat /proc/{p.pid}/cgroup 2>/dev/null || {NA}; echo ""; '
        'echo "=== Cgroup limits ==="; '
        f"cgroup_path=$(head -1 /proc/{p.pid}/cgroup 2>/dev/null | cut -d: -f3); "
        'if [ -n "$cgroup_path" ]; then '
        'echo "CPU quota:"; cat /sys/fs/cgroup/cpu$cgroup_path/cpu.cfs_quota_us 2>/dev/null || echo "unlimited"; '
        'echo "Memory limit:"; cat /sys/fs/cgroup/memory$cgroup_path/memory.limit_in_bytes 2>/dev/null | '
        "awk '{if($1==9223372036854771712) print \"unlimited\"; else print $1/1024/1024 \"MB\"}' "
        '|| echo "unlimited"; '
        'else echo "No cgroup path found"; fi'
    )


@catalog.action("container", "Detect container", SECURITY, "Process {pid} - Container detection")
def container(p: Process) -> str:
    return (
        'echo "=== Container detection ==="; '
        '[ -f /.dockerenv ] && echo "✓ /.dockerenv present" || echo "✗ No /.dockerenv"; '
        f'grep -qE "docker|lxc|kubepods" /proc/{p.pid}/cgroup 2>/dev/null '
        '&& echo "✓ Container cgroup detected" || echo "✗ No container cgroup"; '
        f'echo "Runtime: $(grep -oE "docker|lxc|kubepods|containerd" /proc/{p.pid}/cgroup 2>/dev/null '
        '| head -1)"'
    )


@catalog.action("uptime", "View process uptime", INFO, "Process {pid} - Uptime")
def uptime(p: Process) -> str:
    return (
        f"start_time=$(awk '{{print $22}}' /proc/{p.pid}/stat 2>/dev/null); "
        'if [ -n "$start_time" ]; then '
        "hz=$(getconf CLK_TCK); runtime=$(( $(cut -d. -f1 /proc/uptime) - start_time / hz )); "
        f'echo "Started: $(ps -p {p.pid} -o lstart --no-headers 2>/dev/null)"; '
        'echo "Running for: $((runtime / 86400))d $(((runtime % 86400) / 3600))h '
        '$(((runtime % 3600) / 60))m $((runtime % 60))s"; '
        'else echo "Cannot read process start time"; fi'
    )


@catalog.action("fd-stats", "File descriptor statistics", INFO, "Process {pid} - File descriptor statistics")
def fd_stats(p: Process) -> str:
    return (
        f"fd_count=$(ls /proc/{p.pid}/fd 2>/dev/null | wc -l); "
        f"fd_limit=$(grep \"Max open files\" /proc/{p.pid}/limits 2>/dev/null | awk '{{print $4}}'); "
        'echo "Open: $fd_count"; echo "Limit: $fd_limit"; echo ""; '
        'echo "=== Descriptor types ==="; '
        f"for fd in /proc/{p.pid}/fd/*; do readlink $fd 2>/dev/null; done | "
        "awk '{if(/^socket:/) print \"socket\"; else if(/^pipe:/) print \"pipe\"; "
        "else if(/^anon_inode:/) print \"anon_inode\"; else if(/^\\//) print \"file\"; else print \"other\"}' | "
        "sort | uniq -c | sort -rn"
    )


@catalog.action("suspicious-path", "Check suspicious paths", SECURITY, "Process {pid} - Suspicious path check")
def suspicious_path(p: Process) -> str:
    return (
        f"exe=$(readlink /proc/{p.pid}/exe 2>/dev/null); cwd=$(readlink /proc/{p.pid}/cwd 2>/dev/null); "
        'echo "Executable: $exe"; echo "Working dir: $cwd"; echo ""; '
        '[[ "$exe" =~ ^(/tmp|/dev/shm|/var/tmp) ]] && echo "⚠️ Executable in suspicious directory: $exe" '
        '|| echo "✓ Executable path looks normal"; '
        '[[ "$cwd" =~ ^(/tmp|/dev/shm|/var/tmp) ]] && echo "⚠️ Working directory is suspicious: $cwd" '
        '|| echo "✓ Working directory looks normal"'
    )


@catalog.action("hidden-process", "Check for hiding", SECURITY, "Process {pid} - Hidden process check")
def hidden_process(p: Process) -> str:
    return (
        f'ps -p {p.pid} >/dev/null 2>&1 && echo "✓ Visible to ps" '
        '|| echo "⚠️ Not visible to ps (possibly hidden)"; '
        f'ls -la /proc/{p.pid} 2>/dev/null | head -5 || echo "⚠️ Cannot access /proc/{p.pid}"'
    )


@catalog.action("ld-preload", "Check LD_PRELOAD", SECURITY, "Process {pid} - LD_PRELOAD check")
def ld_preload(p: Process) -> str:
    return (
        f"cat /proc/{p.pid}/environ 2>/dev/null | tr '\\0' '\\n' | "
        'grep -E "^(LD_PRELOAD|LD_LIBRARY_PATH)=" && echo "⚠️ LD_PRELOAD or LD_LIBRARY_PATH is set" '
        '|| echo "✓ No LD_PRELOAD detected"'
    )


@catalog.action("deleted-exe", "Check deleted executable", SECURITY, "Process {pid} - Deleted executable check")
def deleted_exe(p: Process) -> str:
    return (
        f"ls -l /proc/{p.pid}/exe 2>/dev/null | grep deleted && "
        'echo "⚠️ Executable has been deleted (possible malware)" || echo "✓ Executable is present"'
    )


@catalog.action("suspicious-network", "Check remote peers", SECURITY, "Process {pid} - Suspicious connection check")
def suspicious_network(p: Process) -> str:
    return (
        f'echo "Connections:"; ss -tnp 2>/dev/null | grep "pid={p.pid}"; echo ""; '
        f"ss -tnp 2>/dev/null | grep \"pid={p.pid}\" | awk '{{print $5}}' | cut -d: -f1 | sort -u | "
        'while read ip; do echo "Peer: $ip"; '
        'whois $ip 2>/dev/null | grep -E "^(Country|OrgName):" || echo "whois lookup failed"; done'
    )


@catalog.action("crypto-mining", "Check crypto-mining traits", SECURITY, "Process {pid} - Crypto-mining check")
def crypto_mining(p: Process) -> str:
    return (
        f"cat /proc/{p.pid}/cmdline 2>/dev/null | tr '\\0' ' ' | "
        'grep -iE "(xmrig|minerd|cpuminer|stratum|pool|mining)" && echo "⚠️ Mining keywords in command line" '
        '|| echo "✓ No mining keywords"; '
        f'ss -tnp 2>/dev/null | grep "pid={p.pid}" | grep -E ":(3333|4444|5555|8080|14444)" '
        '&& echo "⚠️ Connected to a common pool port" || echo "✓ No pool ports"; '
        f"ps -p {p.pid} -o %cpu,cmd 2>/dev/null"
    )


@catalog.action("kill", "Terminate (SIGTERM)", MANAGEMENT, "Process {pid} - Terminate")
def kill(p: Process) -> str:
    return f'kill {p.pid} 2>&1 && echo "✓ Termination signal sent" || echo "✗ Termination failed"'


@catalog.action("kill-9", "Force kill (SIGKILL)", MANAGEMENT, "Process {pid} - Force kill")
def kill_9(p: Process) -> str:
    return f'kill -9 {p.pid} 2>&1 && echo "✓ Process killed" || echo "✗ Force kill failed"'
