"""
View controllers.

Each controller is an immutable dataclass with update(msg) returning the
replacement state and a list of effects, and render() returning the view
body. Controllers never call each other; cross-view effects are Navigate
messages interpreted by the root controller.
"""
