"""Application layer: collaborator ports and admission services."""
