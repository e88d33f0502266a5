# CLI package for SuperModel
"""
Command line interface for inspecting models and converting JSON payloads.

Commands:
    supermodel describe  — Show a model's field descriptors
    supermodel load      — Build models from JSON and print them back
    supermodel models    — List registered model types
"""
