"""Macro Expansion Engine for policy values.

Performs text substitution of macros in disallowed values and regex rules
before they are compared against a password. Supports built-in user macros,
caller-defined static macros, and positional parameters.
"""

import re

from passpolicy.core.logging import get_logger
from passpolicy.domain.entities.user_context import UserContext

logger = get_logger(__name__)

# Pattern to match macros: @name or @name(arg1, arg2, ...)
MACRO_PATTERN = re.compile(r"@([a-zA-Z_][a-zA-Z0-9_]*)(?:\((.*?)\))?")


class MacroExpander:
    """Expands macros in policy values via text substitution.

    Built-in macros resolve against the user the password belongs to:

    - ``@user_id``: the user's identifier
    - ``@username``: the user's login name
    - ``@user_attr(name)``: a cached directory attribute of the user

    Static macros are templates that may reference ``$1``, ``$2`` ... and are
    expanded recursively. Unknown macros are left as written, so regexes that
    contain a literal ``@`` survive expansion.
    """

    MAX_RECURSION_DEPTH = 3
    USER_MACROS = frozenset({"user_id", "username", "user_attr"})

    def __init__(
        self,
        user: UserContext | None = None,
        static_macros: dict[str, str] | None = None,
    ) -> None:
        """Initialize the expander.

        Args:
            user: The user the expanded values are evaluated for.
            static_macros: Mapping of macro name to substitution template.
        """
        self.user = user
        self.static_macros = dict(static_macros or {})

    def _user_macro(self, name: str, args: list[str]) -> str:
        if self.user is None:
            return ""
        if name == "user_id":
            return self.user.user_id or ""
        if name == "username":
            return self.user.username or ""
        if not args:
            return ""
        return self.user.attribute(args[0]) or ""

    def expand(self, expression: str, depth: int = 0) -> str:
        """Recursively expand macros in the given expression.

        Args:
            expression: The policy value to expand.
            depth: Current recursion depth.

        Returns:
            The expanded expression. Past the maximum recursion depth the
            expression is returned unexpanded.
        """
        if depth > self.MAX_RECURSION_DEPTH:
            logger.error(
                "Max macro recursion depth exceeded, leaving macro unexpanded",
                expression=expression,
                max_depth=self.MAX_RECURSION_DEPTH,
            )
            return expression

        if not expression or "@" not in expression:
            return expression

        result = expression
        matches = list(MACRO_PATTERN.finditer(expression))
        # Process in reverse to maintain offsets
        for match in reversed(matches):
            macro_name = match.group(1)
            macro_args_str = match.group(2)

            args = []
            if macro_args_str:
                args = [arg.strip() for arg in macro_args_str.split(",")]

            if macro_name in self.USER_MACROS:
                replacement = self._user_macro(macro_name, args)
            elif macro_name in self.static_macros:
                replacement = self.static_macros[macro_name]
                for i, arg in enumerate(args):
                    replacement = replacement.replace(f"${i + 1}", arg)
                replacement = self.expand(replacement, depth + 1)
            else:
                continue

            start, end = match.span()
            result = result[:start] + replacement + result[end:]

        return result
