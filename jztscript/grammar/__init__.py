"""Public grammar entry points.

Keyword tables and stack helpers are intentionally not re-exported from this
module. Use :class:`jztscript.grammar.core.ScriptGrammar` as the stable API.
"""

from jztscript.grammar.core import ScriptGrammar

__all__ = ["ScriptGrammar"]
