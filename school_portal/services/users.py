from typing import List, Optional, Union
from school_portal.schemas.common import ApiResponse
from school_portal.schemas.users import User, UserCreate, UserQuery, UserRolesUpdate, UserUpdate
from school_portal.services.base import API_PREFIX, ResourceService, as_model
from school_portal.services.query_cache import make_key

BASE = f"{API_PREFIX}/users"


class UserService(ResourceService):
    async def list(self, query: Union[UserQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(UserQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[User])

        return await self._query(
            make_key("users", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def get(self, user_id: str) -> Optional[User]:
        async def fetch():
            response = await self.api.get(f"{BASE}/{user_id}", model=User)
            return response.data

        return await self._query(("user", user_id), fetch, enabled=bool(user_id))

    async def create(self, data: Union[UserCreate, dict]) -> User:
        payload = as_model(UserCreate, data)

        async def send():
            response = await self.api.post(BASE, json=payload, model=User)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("users", self.branch_id)],
            success="User created successfully",
            failure="Failed to create user",
        )

    async def update(self, user_id: str, data: Union[UserUpdate, dict]) -> User:
        payload = as_model(UserUpdate, data)

        async def send():
            response = await self.api.put(f"{BASE}/{user_id}", json=payload, model=User)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("users", self.branch_id), ("user", user_id)],
            success="User updated successfully",
            failure="Failed to update user",
        )

    async def update_roles(self, user_id: str, role_ids: List[str]) -> User:
        payload = UserRolesUpdate(role_ids=role_ids)

        async def send():
            response = await self.api.put(f"{BASE}/{user_id}/roles", json=payload, model=User)
            return response.data

        return await self._mutate(
            send,
            invalidate=[("users", self.branch_id), ("user", user_id)],
            success="User roles updated successfully",
            failure="Failed to update user roles",
        )

    async def deactivate(self, user_id: str) -> None:
        async def send():
            await self.api.delete(f"{BASE}/{user_id}")

        await self._mutate(
            send,
            invalidate=[("users", self.branch_id)],
            success="User deactivated successfully",
            failure="Failed to deactivate user",
        )
