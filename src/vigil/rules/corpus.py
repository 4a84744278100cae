"""
Built-in rule corpus.

Entries are declared in evaluation order. When a request matches patterns
from more than one category the first entry wins, so this order is part
of the contract: SSRF, destructive commands, exfiltration, SQL injection,
path traversal, prompt injection, encoding attacks, credential leaks.

Patterns search the normalized request text (compact JSON for structured
params), so quotes inside parameter values appear JSON-escaped. Patterns
that span two anchors allow at most GAP_LIMIT characters between them.
"""

from typing import Any

from vigil.rules.table import RuleTable

# Upper bound on the text a pattern may skip between two of its anchors.
GAP_LIMIT = 256


def _gap(stop: str, char: str = ".") -> str:
    """
    Lazy run of at most GAP_LIMIT `char`s that never crosses `stop`.

    `stop` is the anchor the gap starts from. A search that begins at one
    occurrence of the anchor gives up where the next occurrence begins, so
    text that repeats the anchor thousands of times is still scanned in
    linear time.
    """
    return f"(?:(?!{stop}){char}){{0,{GAP_LIMIT}}}?"


BUILTIN_CORPUS: tuple[dict[str, Any], ...] = (
    {
        "category": "ssrf",
        "decision": "BLOCK",
        "risk": "critical",
        "description": "SSRF/internal network access",
        "flags": "i",
        "patterns": [
            # Cloud metadata endpoints
            r"169\.254\.169\.254",
            r"metadata\.google\.internal",
            r"100\.100\.100\.200",
            r"169\.254\.170\.2",
            r"fd00:ec2::254",
            r"\[::ffff:169\.254\.169\.254\]",
            # Encoded loopback / metadata addresses
            r"0x7f",
            (r"2852039166", ""),
            # Loopback and RFC 1918 hosts
            r"""(?:^|[/"'=])(?:https?://)?(?:localhost|127\.0\.0\.[0-9]+|0\.0\.0\.0|10\.\d+\.\d+\.\d+|172\.(?:1[6-9]|2\d|3[01])\.\d+\.\d+|192\.168\.\d+\.\d+)(?::\d+)?(?:/|$)""",
            r"kubelet:\d+",
            r"localhost:\d+/(?:api|admin|v[12]|health|metrics|debug)",
            r"^(?:file|gopher|dict|ftp|ldap)://",
        ],
    },
    {
        "category": "destructive",
        "decision": "BLOCK",
        "risk": "critical",
        "description": "Destructive command",
        "flags": "i",
        "patterns": [
            r"rm\s+(-[rfvdi]+\s+)*/",
            r"rm\s+-[rfvdi]*\s+~/",
            r"rm\s+-[rfvdi]*\s+\*",
            r"mkfs",
            r"dd\s+if=" + _gap(r"dd\s+if=") + r"of=/dev/",
            r"shred",
            r"wipefs",
            # Reverse shells
            r"/dev/tcp/",
            r"/dev/udp/",
            r"bash\s+-i\s+>&",
            r"nc\s+(-[a-z]+\s+)*-e\s+/bin",
            r"ncat" + _gap(r"ncat") + r"-e\s+/bin",
            r"""python[23]?\s+-c\s+['"]import\s+(?:socket|os|subprocess)""",
            r"""perl\s+-e\s+['"]""" + _gap(r"""perl\s+-e\s+['"]""") + r"socket",
            r"ruby\s+-rsocket",
            r"socat" + _gap(r"socat") + r"exec",
            r"telnet" + _gap(r"telnet") + r"\|" + _gap(r"\|") + r"(?:bash|sh)",
            # Privilege and environment tampering
            r"chmod\s+[0-7]*[4567][0-7]{2}\s+/(?:etc|usr|bin|sbin)",
            r"chown\s+root",
            r"passwd\s+root",
            r"visudo",
            r"unset\s+(?:PATH|HOME|USER|SHELL)",
            r"export\s+PATH\s*=\s*$",
            # Infrastructure teardown
            r"kubectl\s+delete\s+(?:namespace|ns)\s+production",
            r"docker\s+(?:rm|rmi)\s+-f" + _gap(r"docker\s+(?:rm|rmi)\s+-f") + r"--all",
            r"docker\s+system\s+prune\s+-af",
        ],
    },
    {
        "category": "exfiltration",
        "decision": "BLOCK",
        "risk": "critical",
        "description": "Data exfiltration",
        "flags": "",
        "patterns": [
            (r"curl" + _gap(r"curl") + r"(?:evil|attacker|malicious|webhook\.site|ngrok|requestbin|pipedream)", "i"),
            (r"wget" + _gap(r"wget") + r"(?:evil|attacker|malicious)", "i"),
            (r"curl" + _gap(r"curl") + r"\$\(cat\s+/etc/", "i"),
            (r"curl" + _gap(r"curl") + r"-d" + _gap(r"-d") + r"(?:password|secret|key|token|credentials)", "i"),
            r"/etc/shadow",
            (r"/etc/passwd" + _gap(r"/etc/passwd") + r"(?:curl|wget|nc|send)", "i"),
            r"\.ssh/id_(?:rsa|ed25519|ecdsa)(?:\.pub)?",
            r"\.aws/credentials",
            r"\.env(?:\.|$)",
        ],
    },
    {
        "category": "sql_injection",
        "decision": "BLOCK",
        "risk": "high",
        "description": "SQL injection",
        "flags": "i",
        "patterns": [
            r";\s*DROP\s+TABLE",
            r";\s*DELETE\s+FROM\s+\w+\s*(?:;|$)",
            r";\s*TRUNCATE\s+TABLE",
            r";\s*ALTER\s+TABLE\s+\w+\s+DROP",
            r"UNION\s+(?:ALL\s+)?SELECT",
            r"""(?:OR|AND)\s+['"]?1['"]?\s*=\s*['"]?1""",
            r";\s*UPDATE\s+\w+\s+SET\s" + _gap(r";\s*UPDATE\s+\w+\s+SET\s") + r"WHERE\s+1\s*=\s*1",
            # Trailing comment that cuts off the rest of a query
            (r"--\s*$", "m"),
        ],
    },
    {
        "category": "path_traversal",
        "decision": "BLOCK",
        "risk": "high",
        "description": "Path traversal",
        "flags": "",
        "patterns": [
            r"\.\./",
            r"\.\.%2[fF]",
            r"\.\.\\(?!\\)",
            r"/etc/(?:passwd|shadow|hosts|sudoers)",
            r"/proc/self",
            r"/root/\.(?:bash|ssh|gnupg)",
        ],
    },
    {
        "category": "prompt_injection",
        "decision": "BLOCK",
        "risk": "high",
        "description": "Prompt injection",
        "flags": "i",
        "patterns": [
            r"ignore\s+(?:all\s+)?(?:previous|prior|above)\s+(?:instructions?|rules?|guidelines?)",
            r"disregard\s+(?:your\s+)?(?:instructions?|rules?|guidelines?|training)",
            r"you\s+are\s+now\s+(?:DAN|unrestricted|unfiltered|jailbroken)",
            r"(?:new|override|updated?)\s+(?:system\s+)?(?:prompt|directive|instruction)",
            r"developer\s+mode\s+(?:enabled|activated|on)",
            r"all\s+restrictions?\s+(?:are\s+)?(?:lifted|removed|disabled)",
            r"pretend\s+you\s+(?:are|have)\s+no\s+(?:restrictions?|rules?|limits?)",
            r"output\s+(?:your\s+)?(?:system\s+)?prompt",
            r"reveal\s+(?:your\s+)?(?:system\s+)?(?:prompt|instructions?)",
            # Chat-template control tokens
            r"\[INST\]|\[/INST\]|<\|im_start\|>|<\|system\|>",
            (
                r"<!--" + _gap(r"<!--", r"[\s\S]") + r"(?:system|prompt|instruction)"
                + _gap(r"-->", r"[\s\S]") + r"-->"
            ),
        ],
    },
    {
        "category": "encoding_attack",
        "decision": "BLOCK",
        "risk": "high",
        "description": "Encoding/obfuscation attack",
        "flags": "i",
        "patterns": [
            r"base64\s+-d",
            r"atob\s*\(",
            r"btoa\s*\(",
            r"eval\s*\(\s*(?:atob|Buffer\.from|decode|fromhex)",
            r"exec\s*\(\s*(?:bytes\.fromhex|codecs\.decode|compile)",
            r"\\x[0-9a-f]{2}" + _gap(r"\\x[0-9a-f]{2}") + r"\\x[0-9a-f]{2}",
            r"\$\(printf\s+'\\x",
            r"rot13",
            r"charCodeAt|fromCharCode" + _gap(r"fromCharCode") + r"(?:eval|exec)",
        ],
    },
    {
        "category": "credential_leak",
        "decision": "ESCALATE",
        "risk": "critical",
        "description": "Credential exposure",
        "flags": "",
        "patterns": [
            (r"""(?:api[_-]?key|secret[_-]?key|access[_-]?token|private[_-]?key)\s*[=:]\s*['"]?[a-zA-Z0-9_\-]{20,}""", "i"),
            r"sk-[a-zA-Z0-9]{20,}",
            r"ghp_[a-zA-Z0-9]{36}",
            r"(?:AKIA|ABIA|ACCA|ASIA)[A-Z0-9]{16}",
            r"(?:xoxb|xoxp|xapp)-[a-zA-Z0-9\-]+",
            r"-----BEGIN (?:RSA |EC )?PRIVATE KEY-----",
        ],
    },
)

RULE_TABLE = RuleTable.from_corpus(BUILTIN_CORPUS)
