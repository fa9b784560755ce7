"""Engine boundary primitives (events yielded by the interpreter and the handle that yields them).

Kept free of Redis and console concerns so the controller, CLI, and tests share them.
"""
