from typing import Annotated
from fastapi import Depends
from caja.modules.auth.dependencies import AuthDependencies
from caja.modules.auth.schemas import AuthContext

user_dependency = Annotated[AuthContext, Depends(AuthDependencies.get_auth_context)]
