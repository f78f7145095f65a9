"""Python AST to Aiken syntax translators"""
