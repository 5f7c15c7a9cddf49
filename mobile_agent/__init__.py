"""Android command agent: uiautomator2 interface + OpenRouter planner + CLI."""
