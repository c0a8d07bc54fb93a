"""State layer.

Typed properties, dynamic variables, the dispatcher that unifies them,
change notifications and the JSON snapshot.
"""
