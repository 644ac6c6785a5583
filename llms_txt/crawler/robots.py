# llms_txt/crawler/robots.py
"""
Parser and checker for robots.txt rules.

Rules are grouped per lower-cased user-agent token. A URL is evaluated against
the group picked for the crawler: the longest matching Disallow pattern is
compared with the longest matching Allow pattern and ties favour Allow.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote, urlsplit

from aiohttp import ClientSession

from llms_txt.crawler.fetcher import USER_AGENT, fetch_with_retry
from llms_txt.logger import get_logger

ROBOTS_RETRIES = 2
ROBOTS_RETRY_DELAY = 0.5

_AGENT_TOKEN_RE = re.compile(r"[/\s]")
_DEFAULT_PORTS = {"http": 80, "https": 443}
# characters kept as-is when percent-encoding paths; "%" keeps existing escapes intact
_PATH_SAFE = "/%:@!$&'()*+,;=~"

logger = get_logger(__name__)


@dataclass(slots=True)
class PatternRule:
    """A robots.txt path pattern compiled to a start-anchored regex."""

    raw: str
    regex: re.Pattern[str]


@dataclass(slots=True)
class RobotsGroup:
    allow: List[PatternRule] = field(default_factory=list)
    disallow: List[PatternRule] = field(default_factory=list)


RobotsMap = Dict[str, RobotsGroup]


def compile_pattern(pattern: str) -> PatternRule:
    """Compile a path pattern: ``*`` matches anything, ``$`` anchors the end, the rest is literal."""
    normalized = pattern.strip() or "/"
    if not normalized.startswith("/"):
        normalized = "/" + normalized
    parts = []
    for char in quote(normalized, safe=_PATH_SAFE + "?"):
        if char == "*":
            parts.append(".*")
        elif char == "$":
            parts.append("$")
        else:
            parts.append(re.escape(char))
    return PatternRule(raw=normalized, regex=re.compile("^" + "".join(parts)))


def parse_robots_txt(content: str) -> RobotsMap:
    """Parse robots.txt text into ``{agent: RobotsGroup}``."""
    groups: RobotsMap = {}
    current_agents: List[str] = []
    has_rules_in_block = False

    for raw_line in content.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            current_agents = []
            has_rules_in_block = False
            continue

        directive, sep, value = line.partition(":")
        if not sep:
            continue
        directive = directive.strip().lower()
        value = value.strip()

        if directive == "user-agent":
            if has_rules_in_block:
                current_agents = []
                has_rules_in_block = False
            agent = value.lower()
            if not agent:
                continue
            groups.setdefault(agent, RobotsGroup())
            current_agents.append(agent)
        elif directive in ("allow", "disallow"):
            if not current_agents:
                continue
            has_rules_in_block = True
            # пустой Disallow разрешает все, пропускаем
            if directive == "disallow" and not value:
                continue
            rule = compile_pattern(value)
            for agent in current_agents:
                group = groups.setdefault(agent, RobotsGroup())
                getattr(group, directive).append(rule)

    return groups


def pick_group_for_agent(user_agent: str, groups: RobotsMap) -> Optional[RobotsGroup]:
    """Exact agent match, then its product token, then ``*``."""
    lower = user_agent.lower()
    if lower in groups:
        return groups[lower]
    token = _AGENT_TOKEN_RE.split(lower, 1)[0]
    if token and token in groups:
        return groups[token]
    return groups.get("*")


def longest_match(path: str, rules: List[PatternRule]) -> int:
    longest = 0
    for rule in rules:
        match = rule.regex.match(path)
        if match and len(match.group(0)) > longest:
            longest = len(match.group(0))
    return longest


def robots_target(url: str) -> str:
    """Percent-encoded path plus query of *url*, ``/`` when both are empty."""
    parts = urlsplit(url)
    target = quote(parts.path, safe=_PATH_SAFE)
    if parts.query:
        target += "?" + quote(parts.query, safe=_PATH_SAFE + "?/")
    return target or "/"


def robots_origin(url: str) -> str:
    """``scheme://host[:port]`` with default ports dropped. Empty for relative URLs."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return ""
    scheme = parts.scheme.lower()
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


def is_allowed_by_group(url: str, group: RobotsGroup) -> bool:
    target = robots_target(url)
    longest_disallow = longest_match(target, group.disallow)
    if longest_disallow == 0:
        return True
    return longest_match(target, group.allow) >= longest_disallow


class RobotsManager:
    """Per-origin robots.txt cache for one crawl run. Fails open on any error."""

    def __init__(self, session: ClientSession, user_agent: str = USER_AGENT) -> None:
        self.session = session
        self.user_agent = user_agent
        self._cache: Dict[str, Optional[RobotsMap]] = {}

    async def can_crawl(self, target_url: str) -> bool:
        """Return True if the crawler may fetch *target_url*."""
        try:
            origin = robots_origin(target_url)
            if not origin:
                return True
            rules = await self._load_rules(origin)
            if not rules:
                return True
            group = pick_group_for_agent(self.user_agent, rules)
            if group is None:
                return True
            return is_allowed_by_group(target_url, group)
        except Exception as exc:
            logger.warning("robots.txt check failed for %s, allowing: %s", target_url, exc)
            return True

    async def _load_rules(self, origin: str) -> Optional[RobotsMap]:
        if origin in self._cache:
            return self._cache[origin]

        robots_url = f"{origin}/robots.txt"
        try:
            resp = await fetch_with_retry(
                self.session, robots_url, retries=ROBOTS_RETRIES, delay=ROBOTS_RETRY_DELAY
            )
        except Exception as exc:
            logger.warning("Error loading %s: %s", robots_url, exc)
            self._cache[origin] = None
            return None

        if not resp.ok:
            logger.debug("robots.txt %s -> HTTP %s", robots_url, resp.status)
            self._cache[origin] = None
            return None

        parsed = parse_robots_txt(resp.text)
        self._cache[origin] = parsed
        return parsed


__all__ = [
    "PatternRule",
    "RobotsGroup",
    "RobotsManager",
    "compile_pattern",
    "parse_robots_txt",
    "pick_group_for_agent",
    "longest_match",
    "is_allowed_by_group",
    "robots_origin",
    "robots_target",
]
