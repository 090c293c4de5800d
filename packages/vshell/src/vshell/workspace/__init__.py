"""Workspace storage providers."""

from vshell.workspace.base import WorkspaceProvider
from vshell.workspace.memory import MemoryWorkspaceProvider
from vshell.workspace.file import FileWorkspaceProvider
