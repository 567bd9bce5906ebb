"""Organization bounded context: the group forest and person assignments.

A regular package, so that ``org`` always resolves to this directory even
when a mirrored ``org`` directory of tests is also on ``sys.path``.
"""
