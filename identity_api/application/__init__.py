"""
===============================================================================
APPLICATION LAYER
===============================================================================

Orquestación de casos de uso sobre registros de identidad:
  - usecases/users: ciclo de vida (policy -> invariantes -> mutación -> vista)
  - dev_seed_admin: bootstrap local de un admin

Nota:
  - Los casos de uso se importan desde `usecases/` subdirectories.
===============================================================================
"""
