"""
Comment directives: `# @when x`, `# @pipe a |> f`, `# @expect x, "msg"`.

A directive binds to the first code line that follows it.
"""

import io
import logging
import re
import tokenize
from typing import Dict, List

from ..core.models import Directive

logger = logging.getLogger(__name__)

_DIRECTIVE = re.compile(r"#\s*@(when|pipe|expect)\b\s*(.*)$")

_NON_CODE_TOKENS = {
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
    tokenize.ENDMARKER,
}


def scan_directives(source: str) -> Dict[int, List[Directive]]:
    """Map each code line number to the directives written above it"""
    directives: Dict[int, List[Directive]] = {}
    pending: List[Directive] = []

    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(source).readline))
    except (tokenize.TokenError, SyntaxError) as e:
        logger.warning("Could not scan comment directives: %s", e)
        return directives

    for token in tokens:
        if token.type == tokenize.COMMENT:
            match = _DIRECTIVE.match(token.string)
            if match:
                pending.append(Directive(kind=match.group(1), text=match.group(2).strip(), line=token.start[0]))
            continue
        if token.type in _NON_CODE_TOKENS or not pending:
            continue
        directives.setdefault(token.start[0], []).extend(pending)
        pending = []

    for directive in pending:
        logger.warning("@%s directive on line %d precedes no code", directive.kind, directive.line)

    return directives
