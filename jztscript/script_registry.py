from typing import Dict, List, Optional

from jztscript.context import ContextOptions, ScriptContext
from jztscript.grammar import ScriptGrammar
from jztscript.owner import ScriptOwner
from jztscript.script import DiagnosticHandler, Script, ScriptDiagnostic, default_grammar


class ScriptRegistry:
    """
    Holds named scripts, parsed once and shared by every actor that runs them.
    """

    def __init__(
        self,
        *,
        options: Optional[ContextOptions] = None,
        on_error: Optional[DiagnosticHandler] = None,
        grammar: Optional[ScriptGrammar] = None,
    ):
        self.options = options or ContextOptions()
        self.on_error = on_error
        self.grammar = grammar or default_grammar()
        self.scripts: Dict[str, Script] = {}

    def register(self, name: str, raw_text: str) -> Script:
        if name in self.scripts:
            raise ValueError(f"Script '{name}' already declared.")
        script = Script(name, raw_text, grammar=self.grammar, on_error=self.on_error)
        self.scripts[name] = script
        return script

    def has_script(self, name: str) -> bool:
        return name in self.scripts

    def get(self, name: str) -> Script:
        try:
            return self.scripts[name]
        except KeyError as exc:
            raise KeyError(f"Unknown script '{name}'.") from exc

    def names(self) -> List[str]:
        return list(self.scripts)

    def diagnostics(self) -> List[ScriptDiagnostic]:
        return [
            script.diagnostic
            for script in self.scripts.values()
            if script.diagnostic is not None
        ]

    def new_context(self, name: str, owner: ScriptOwner) -> ScriptContext:
        return ScriptContext(self.get(name), owner, self.options)

    def serialize(self) -> List[Dict[str, str]]:
        return [script.serialize() for script in self.scripts.values()]
