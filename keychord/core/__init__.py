"""UI-agnostic keybinding engine."""
