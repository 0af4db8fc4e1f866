"""Generate ctags files for a project and the sources of its dependencies."""
