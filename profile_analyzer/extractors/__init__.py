"""Module name extraction for call frames."""

from .module_resolver import AmdModuleResolver, ModuleResolver, StaticModuleResolver

__all__ = ["ModuleResolver", "StaticModuleResolver", "AmdModuleResolver"]
