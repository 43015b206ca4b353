from typing import Annotated
from fastapi import Depends
from snackhub.modules.auth.utils import get_current_user
from snackhub.modules.users.models import User

user_dependency = Annotated[User, Depends(get_current_user)]
