"""Project module for expanding an entry file into the program file set.

Public API:
    build_project_files(tree, config, entry_tree) -> ProjectFileSet
"""

from plugincheck.project.graph import ProjectFileSet, SkippedFile, build_project_files
from plugincheck.project.resolution import ModuleResolver, is_declaration_file, is_vendored

__all__ = [
    "build_project_files",
    "ProjectFileSet",
    "SkippedFile",
    "ModuleResolver",
    "is_declaration_file",
    "is_vendored",
]
