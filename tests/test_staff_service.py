"""
Tests for StaffService: the add / edit / delete flows, their states,
and the guarantee that a failed action never changes the displayed list.
"""

import pytest
from werkzeug.security import check_password_hash

from db.errors import QueryError
from models.role import Role
from services.staff_service import ActionResult, FlowState, StaffService
from services.validation import DuplicateEmailError, ValidationError


@pytest.fixture
def service(fake_repo, fake_hasher):
    return StaffService(repo=fake_repo, hasher=fake_hasher)


class TestLoad:

    def test_load_lists_staff_only_sorted_by_name(self, service, fake_repo):
        fake_repo.seed("Zoe", "zoe@x.com")
        fake_repo.seed("Boss", "boss@x.com", Role.ADMIN)
        fake_repo.seed("Ana", "ana@x.com")

        result = service.load()

        assert result.success
        assert [s.name for s in service.staff] == ["Ana", "Zoe"]
        assert "ana@x.com" in result.message
        assert "boss@x.com" not in result.message

    def test_load_failure_keeps_previous_list(self, service, fake_repo):
        fake_repo.seed("Ana", "ana@x.com")
        service.load()
        fake_repo.fail_on.add("list_by_role")

        result = service.load()

        assert not result.success
        assert [s.name for s in service.staff] == ["Ana"]

    def test_empty_table_message(self, service):
        service.load()
        text = service.render_table()
        assert "No staff members yet" in text
        assert "/add\\_staff" in text

    def test_backticks_in_cells_cannot_close_the_code_block(self, service, fake_repo):
        fake_repo.seed("Ana `x`", "ana@x.com")
        service.load()

        text = service.render_table()

        assert text.count("```") == 2
        assert "Ana 'x'" in text

    def test_render_table_aligns_columns(self, service, fake_repo):
        fake_repo.seed("Ana", "ana@x.com")
        fake_repo.seed("Bartholomew", "b@x.com")
        service.load()

        lines = service.render_table().splitlines()
        assert lines[0] == "👥 Staff (2)"
        header, rule, first, second = lines[2:6]
        assert header.startswith("ID  Name")
        assert set(rule.replace(" ", "")) == {"-"}
        assert first.index("ana@x.com") == second.index("b@x.com")

    def test_find(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()
        assert service.find(ana.id).email == "ana@x.com"
        assert service.find(999) is None


class TestAdd:

    def test_check_form_drives_valid_and_invalid_states(self, service):
        service.begin_add()
        assert service.state is FlowState.FORM_OPEN

        assert service.check_form("Bob", "a@b.com", "short", "short")
        assert service.state is FlowState.INVALID

        assert service.check_form("Bob", "a@b.com", "secret1", "secret1") == []
        assert service.state is FlowState.VALID

    def test_submit_add_persists_hashed_staff_and_refreshes(self, service, fake_repo):
        result = service.submit_add("Ana", "ana@x.com", "secret1", "secret1")

        assert result.success
        assert result.record.id > 0
        assert result.record.password == "hashed$secret1"
        assert result.record.role_id == Role.STAFF
        assert result.record.role_name == "Staff"
        assert [s.id for s in service.staff] == [result.record.id]
        assert fake_repo.rows[result.record.id].password == "hashed$secret1"
        assert service.state is FlowState.IDLE

    def test_submit_add_with_real_hasher(self, fake_repo):
        service = StaffService(repo=fake_repo)
        result = service.submit_add("Ana", "ana@x.com", "secret1", "secret1")

        stored = fake_repo.rows[result.record.id].password
        assert stored != "secret1"
        assert check_password_hash(stored, "secret1")

    def test_invalid_form_never_reaches_the_store(self, service, fake_repo):
        result = service.submit_add("Bob", "a@b.com", "secret1", "secret2")

        assert not result.success
        assert "Passwords do not match." in result.message
        assert fake_repo.calls == []
        assert service.state is FlowState.INVALID

    def test_add_staff_raises_validation_error(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.add_staff("", "a@b.com", "secret1", "secret1")
        assert exc_info.value.problems == ["Name is required."]

    def test_duplicate_email_is_refused_before_hashing(self, fake_repo):
        fake_repo.seed("Boss", "ana@x.com", Role.ADMIN)
        hashed = []
        service = StaffService(repo=fake_repo, hasher=lambda p: hashed.append(p) or "h")

        with pytest.raises(DuplicateEmailError):
            service.add_staff("Ana", "ana@x.com", "secret1", "secret1")

        assert hashed == []
        assert "add" not in fake_repo.calls
        assert service.state is FlowState.INVALID

    def test_submit_add_duplicate_message(self, service, fake_repo):
        fake_repo.seed("Ana", "ana@x.com")
        result = service.submit_add("Ana Bis", "ana@x.com", "secret1", "secret1")
        assert result == ActionResult(False, "❌ This email already exists.")

    @pytest.mark.parametrize("failing", ["email_exists", "add"])
    def test_store_failure_returns_to_idle_and_keeps_list(self, service, fake_repo, failing):
        fake_repo.seed("Zoe", "zoe@x.com")
        service.load()
        fake_repo.fail_on.add(failing)

        result = service.submit_add("Ana", "ana@x.com", "secret1", "secret1")

        assert not result.success
        assert result.message.startswith("❌ Error while adding")
        assert [s.name for s in service.staff] == ["Zoe"]
        assert service.state is FlowState.IDLE

    def test_add_staff_propagates_store_errors(self, service, fake_repo):
        fake_repo.fail_on.add("add")
        with pytest.raises(QueryError):
            service.add_staff("Ana", "ana@x.com", "secret1", "secret1")

    def test_refresh_failure_after_add_keeps_list(self, service, fake_repo):
        fake_repo.seed("Zoe", "zoe@x.com")
        service.load()
        fake_repo.fail_on.add("list_by_role")

        result = service.submit_add("Ana", "ana@x.com", "secret1", "secret1")

        assert not result.success
        assert "could not be refreshed" in result.message
        assert result.record.id in fake_repo.rows
        assert [s.name for s in service.staff] == ["Zoe"]
        assert service.state is FlowState.IDLE


class TestEdit:

    def test_edit_updates_name_and_email(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com", password="digest")
        service.load()

        result = service.edit_staff(ana.id, "Ana Maria", "am@x.com")

        assert result.success
        assert (service.staff[0].name, service.staff[0].email) == ("Ana Maria", "am@x.com")
        assert fake_repo.rows[ana.id].password == "digest"
        assert service.state is FlowState.IDLE

    def test_edit_keeps_list_untouched_on_failure(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()
        displayed = service.staff[0]
        fake_repo.fail_on.add("update")

        result = service.edit_staff(ana.id, "Ana Maria", "am@x.com")

        assert result == ActionResult(False, "❌ Error while updating.")
        assert service.staff[0] is displayed
        assert displayed.name == "Ana"
        assert service.state is FlowState.IDLE

    def test_edit_unknown_id(self, service):
        service.load()
        result = service.edit_staff(42, "X", "x@x.com")
        assert not result.success
        assert "#42" in result.message

    def test_edit_rejects_blank_fields(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()

        result = service.edit_staff(ana.id, "", "ana@x.com")

        assert not result.success
        assert "update" not in fake_repo.calls

    def test_edit_refuses_email_of_another_account(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        fake_repo.seed("Bea", "bea@x.com")
        service.load()

        result = service.edit_staff(ana.id, "Ana", "bea@x.com")

        assert result.message == "❌ This email already exists."
        assert fake_repo.rows[ana.id].email == "ana@x.com"

    def test_edit_same_email_skips_uniqueness_check(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()
        fake_repo.calls.clear()

        assert service.edit_staff(ana.id, "Ana Maria", "ana@x.com").success
        assert "email_exists" not in fake_repo.calls

    def test_edit_of_member_removed_meanwhile_is_a_no_op(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()
        del fake_repo.rows[ana.id]

        result = service.edit_staff(ana.id, "Ana Maria", "am@x.com")

        assert not result.success
        assert "was not changed" in result.message
        assert service.staff == []


class TestDelete:

    def test_confirm_then_delete(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()

        prompt = service.confirm_delete(ana.id)
        assert prompt.success
        assert "Delete Ana?" in prompt.message
        assert service.state is FlowState.CONFIRM
        assert "delete" not in fake_repo.calls

        result = service.delete_staff(ana.id)
        assert result.success
        assert service.staff == []
        assert service.state is FlowState.IDLE

    def test_confirm_unknown_id(self, service):
        service.load()
        assert not service.confirm_delete(7).success

    def test_delete_never_removes_non_staff(self, service, fake_repo):
        boss = fake_repo.seed("Boss", "boss@x.com", Role.ADMIN)
        service.load()

        assert not service.confirm_delete(boss.id).success
        result = service.delete_staff(boss.id)

        assert not result.success
        assert "delete" not in fake_repo.calls
        assert boss.id in fake_repo.rows

    def test_delete_without_confirmation_is_refused(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()

        result = service.delete_staff(ana.id)

        assert not result.success
        assert "not confirmed" in result.message
        assert "delete" not in fake_repo.calls
        assert ana.id in fake_repo.rows

    def test_confirmation_is_for_one_id_only(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        bea = fake_repo.seed("Bea", "bea@x.com")
        service.load()
        service.confirm_delete(ana.id)

        assert not service.delete_staff(bea.id).success
        assert bea.id in fake_repo.rows

    def test_confirmation_is_used_once(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()
        service.confirm_delete(ana.id)
        fake_repo.fail_on.add("delete")
        service.delete_staff(ana.id)
        fake_repo.fail_on.clear()

        assert not service.delete_staff(ana.id).success
        assert ana.id in fake_repo.rows

    def test_delete_failure_keeps_list(self, service, fake_repo):
        ana = fake_repo.seed("Ana", "ana@x.com")
        service.load()
        service.confirm_delete(ana.id)
        fake_repo.fail_on.add("delete")

        result = service.delete_staff(ana.id)

        assert result == ActionResult(False, "❌ Error while deleting.")
        assert [s.name for s in service.staff] == ["Ana"]

    def test_add_then_delete_scenario(self, service):
        added = service.submit_add("Ana", "ana@x.com", "secret1", "secret1").record
        assert [s.name for s in service.staff] == ["Ana"]

        service.confirm_delete(added.id)
        service.delete_staff(added.id)
        assert service.staff == []
