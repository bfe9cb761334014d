"""Components layer - the streaming engine building blocks.

Components are leaf modules that:
- Do NOT import services or workflows
- ARE imported and used BY workflows
- May import from: helpers, other components

Architecture:
- helpers/ = stdlib-only utilities (pure, stateless)
- components/ = engine building blocks (this layer)
- workflows/ = one orchestration per operation
- services/ = configuration and the public facade
"""
