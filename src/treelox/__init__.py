"""treelox: a tree-walking interpreter for the Lox language.

Pipeline: `parser.parse_source` (lark) -> `resolver.resolve` ->
`evaluator.Interpreter.interpret`. `runner.run` threads all three.
"""
