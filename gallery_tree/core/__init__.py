"""GUI-agnostic core of the gallery tree builder: models, collaborators, services."""
