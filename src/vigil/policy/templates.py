"""
Built-in policy templates.

Three variants that differ only in how permissive each rule field is.
They are stored in the file format (camelCase keys) and validated into
PolicyDocument on every load, so callers always get an independent copy.
"""

from typing import Any

BUILTIN_POLICIES: dict[str, dict[str, Any]] = {
    "restrictive": {
        "name": "restrictive",
        "description": "Maximum safety. Blocks most tools, minimal autonomy",
        "version": "1.0",
        "rules": {
            "allowedTools": ["read", "web_search"],
            "blockedTools": ["exec", "write", "delete", "admin"],
            "blockedPatterns": {"exec": ["*"], "write": ["*"], "http_request": ["*"]},
            "allowedPaths": ["/workspace/", "/tmp/"],
            "blockedPaths": ["/etc/", "/root/", "/var/", "/usr/", "/bin/", "/sbin/"],
            "maxParams": {"exec.timeout": 30},
            "network": {"allowOutbound": False, "blockedDomains": ["*"]},
        },
    },
    "moderate": {
        "name": "moderate",
        "description": "Balanced safety. Allows common tools with guardrails",
        "version": "1.0",
        "rules": {
            "allowedTools": ["exec", "read", "write", "web_search", "web_fetch", "db_query"],
            "blockedTools": ["admin", "deploy", "delete_namespace"],
            "blockedPatterns": {
                "exec": ["rm -rf /", "mkfs", "dd if=", "chmod 777", "curl * | bash"],
                "db_query": ["DROP TABLE", "TRUNCATE", "DELETE FROM * WHERE 1=1"],
            },
            "allowedPaths": ["/home/", "/workspace/", "/tmp/", "/var/log/"],
            "blockedPaths": ["/etc/shadow", "/root/.ssh/", "/root/.aws/"],
            "maxParams": {"exec.timeout": 300},
            "network": {
                "allowOutbound": True,
                "blockedDomains": ["webhook.site", "ngrok.io", "requestbin.com", "pipedream.net"],
            },
        },
    },
    "permissive": {
        "name": "permissive",
        "description": "Minimal restrictions. Trusts the agent, blocks only critical threats",
        "version": "1.0",
        "rules": {
            "allowedTools": ["*"],
            "blockedTools": [],
            "blockedPatterns": {"exec": ["rm -rf /", "mkfs", "dd if=*/dev/*", ":(){ :|:& };:"]},
            "allowedPaths": ["*"],
            "blockedPaths": [],
            "maxParams": {"exec.timeout": 600},
            "network": {"allowOutbound": True, "blockedDomains": []},
        },
    },
}

# Order reported by list_policies(): most to least restrictive.
POLICY_NAMES: tuple[str, ...] = ("restrictive", "moderate", "permissive")
