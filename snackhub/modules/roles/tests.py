"""
Tests for the roles module
"""
from snackhub.modules.roles.models import Role


class TestRoleCrud:

    def test_load_roles_includes_permissions(self, client, admin_headers):
        response = client.get("/api/loadRoles", headers=admin_headers)

        assert response.status_code == 200
        by_name = {r["role_name"]: r for r in response.json()["roles"]}
        assert by_name["Cashier"]["permissions"] == ["Dashboard", "POS"]
        assert by_name["Manager"]["permissions"] == ["Dashboard", "Products", "POS", "Feedbacks"]
        assert len(by_name["Admin"]["permissions"]) == 6

    def test_load_roles_requires_authentication(self, client):
        assert client.get("/api/loadRoles").status_code in (401, 403)

    def test_create_role(self, client, admin_headers):
        response = client.post(
            "/api/storeRole",
            json={"roleName": "  Stock Clerk ", "description": "Counts shelves"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["role_name"] == "Stock Clerk"
        # Not in the permission table, so it unlocks nothing
        assert response.json()["permissions"] == []

    def test_duplicate_role_name(self, client, admin_headers):
        response = client.post("/api/storeRole", json={"roleName": "Manager"}, headers=admin_headers)
        assert response.status_code == 422

    def test_blank_role_name(self, client, admin_headers):
        response = client.post("/api/storeRole", json={"roleName": "   "}, headers=admin_headers)
        assert response.status_code == 422
        assert "roleName" in response.json()["errors"]

    def test_update_role(self, client, admin_headers, db_session):
        role = Role(role_name="Temp")
        db_session.add(role)
        db_session.commit()

        response = client.put(
            f"/api/updateRole/{role.role_id}",
            json={"roleName": "Supervisor", "description": "Night shift"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["role_name"] == "Supervisor"

    def test_only_admin_manages_roles(self, client, manager_headers):
        response = client.post("/api/storeRole", json={"roleName": "Intern"}, headers=manager_headers)
        assert response.status_code == 403


class TestDeleteRole:

    def test_delete_unused_role(self, client, admin_headers, db_session):
        role = Role(role_name="Seasonal")
        db_session.add(role)
        db_session.commit()

        response = client.delete(f"/api/deleteRole/{role.role_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Role deleted successfully"}

    def test_role_with_users_cannot_be_deleted(self, client, admin_headers, roles, make_user, db_session):
        """Test the referential guard: the role must remain"""
        make_user("Cashier")
        role_id = roles["Cashier"].role_id

        response = client.delete(f"/api/deleteRole/{role_id}", headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["message"] == "Cannot delete role because it is assigned to one or more users"
        db_session.expire_all()
        assert db_session.get(Role, role_id) is not None

    def test_delete_missing_role(self, client, admin_headers):
        assert client.delete("/api/deleteRole/999", headers=admin_headers).status_code == 404
