"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
└── users/          # Identity record lifecycle (create, read, update, delete, search)

Usage
-----
    from identity_api.application.usecases.users import CreateUserUseCase
"""
