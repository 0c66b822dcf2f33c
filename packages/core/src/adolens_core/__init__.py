"""Core library for adolens: Azure DevOps adapters, text utilities, LLM providers."""
