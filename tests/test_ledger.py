"""
Ledger service tests, run against both the SQLite and the in-memory store.
"""

from datetime import datetime, timedelta

import pytest

from clinancial.errors import NotFoundError, ValidationError
from clinancial.models import Account, FinancialRegister


def make_register(time, value, source, destination, name="Test"):
    return FinancialRegister(
        name=name, time=time, value=value, from_account=source, to_account=destination
    )


class TestGetValue:
    def test_no_registers_is_zero(self, ledger, accounts):
        a, _ = accounts
        assert ledger.get_value(a, 1, 2017) == 0
        assert ledger.get_value(a, 12, 1999) == 0

    def test_current_month_balance(self, ledger, accounts):
        a, b = accounts
        now = datetime.now()
        ledger.add_register(make_register(now, 50, b, a))
        ledger.add_register(make_register(now, 30, a, b))
        ledger.add_register(make_register(now, 130, b, a))

        assert ledger.get_value(a, now.month, now.year) == 150
        assert ledger.get_value(b, now.month, now.year) == -150

    def test_includes_earlier_months(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2016, 6, 1), 20, b, a))
        ledger.add_register(make_register(datetime(2017, 2, 10), 5, a, b))

        assert ledger.get_value(a, 5, 2016) == 0
        assert ledger.get_value(a, 6, 2016) == 20
        assert ledger.get_value(a, 1, 2017) == 20
        assert ledger.get_value(a, 2, 2017) == 15

    def test_december_wraps_to_next_year(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2016, 12, 31, 23, 0), 40, b, a))
        ledger.add_register(make_register(datetime(2017, 1, 1), 10, b, a))

        assert ledger.get_value(a, 12, 2016) == 40
        assert ledger.get_value(a, 1, 2017) == 50

    def test_first_instant_of_next_month_is_excluded(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2017, 4, 1), 99, b, a))
        ledger.add_register(make_register(datetime(2017, 3, 31, 23, 59, 59), 1, b, a))

        assert ledger.get_value(a, 3, 2017) == 1

    def test_later_registers_in_same_month_count_at_month_end(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2017, 3, 2), 10, b, a))
        ledger.add_register(make_register(datetime(2017, 3, 28), 15, b, a))

        assert ledger.get_value(a, 3, 2017) == 25

    def test_external_money(self, ledger, accounts):
        a, _ = accounts
        ledger.add_register(make_register(datetime(2017, 1, 3), 1000, None, a, "Salary"))
        ledger.add_register(make_register(datetime(2017, 1, 4), 250, a, None, "Rent"))

        assert ledger.get_value(a, 1, 2017) == 750

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, ledger, accounts, month):
        with pytest.raises(ValidationError):
            ledger.get_value(accounts[0], month, 2017)

    @pytest.mark.parametrize("month, year", [(12, 9999), (1, 10000), (1, 0)])
    def test_unrepresentable_month_end(self, ledger, accounts, month, year):
        with pytest.raises(ValidationError):
            ledger.get_value(accounts[0], month, year)

    def test_last_representable_month(self, ledger, accounts):
        assert ledger.get_value(accounts[0], 11, 9999) == 0

    def test_opening_value(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2017, 1, 31, 23, 59, 59), 10, b, a))
        ledger.add_register(make_register(datetime(2017, 2, 1), 5, b, a))

        assert ledger.get_opening_value(a, 2, 2017) == 10
        assert ledger.get_opening_value(a, 2, 2017) == ledger.get_value(a, 1, 2017)
        with pytest.raises(ValidationError):
            ledger.get_opening_value(a, 13, 2017)


class TestAddRegister:
    def test_assigns_id(self, ledger, accounts):
        a, b = accounts
        first = ledger.add_register(make_register(datetime(2017, 1, 1, 10), 50, b, a))
        second = ledger.add_register(make_register(datetime(2017, 1, 1, 11), 30, a, b))

        assert first.id > 0
        assert second.id > 0
        assert first.id != second.id

    def test_visible_from_both_endpoints(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2017, 1, 1), 50, b, a))

        assert ledger.get_value(a, 1, 2017) == 50
        assert ledger.get_value(b, 1, 2017) == -50

    @pytest.mark.parametrize("value", [0, -10, None])
    def test_rejects_non_positive_value(self, ledger, accounts, value):
        a, b = accounts
        with pytest.raises(ValidationError):
            ledger.add_register(make_register(datetime(2017, 1, 1), value, b, a))

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_rejects_non_finite_value(self, ledger, accounts, value):
        a, b = accounts
        with pytest.raises(ValidationError):
            ledger.add_register(make_register(datetime(2017, 1, 5), value, b, a))

        assert ledger.get_value(a, 1, 2017) == 0

    def test_rejects_empty_name(self, ledger, accounts):
        a, b = accounts
        with pytest.raises(ValidationError):
            ledger.add_register(make_register(datetime(2017, 1, 1), 5, b, a, name="  "))

    def test_rejects_register_without_accounts(self, ledger):
        with pytest.raises(ValidationError):
            ledger.add_register(make_register(datetime(2017, 1, 1), 5, None, None))

    def test_rejects_same_account_on_both_sides(self, ledger, accounts):
        a, _ = accounts
        with pytest.raises(ValidationError):
            ledger.add_register(make_register(datetime(2017, 1, 1), 5, a, a))

    def test_rejects_unstored_account(self, ledger, accounts):
        a, _ = accounts
        with pytest.raises(ValidationError):
            ledger.add_register(
                make_register(datetime(2017, 1, 1), 5, Account(id=None, name="x"), a)
            )

    def test_rejects_unknown_account(self, ledger, accounts):
        a, _ = accounts
        with pytest.raises(NotFoundError):
            ledger.add_register(
                make_register(datetime(2017, 1, 1), 5, Account(id=999, name="x"), a)
            )


class TestGetRegisterById:
    def test_round_trip(self, ledger, accounts):
        a, b = accounts
        when = datetime(2017, 5, 6, 7, 8, 9)
        stored = ledger.add_register(make_register(when, 12.5, b, a, name="Lunch"))

        found = ledger.get_register_by_id(stored.id)
        assert found.id == stored.id
        assert found.name == "Lunch"
        assert found.time == when
        assert found.value == 12.5
        assert found.from_account.id == b.id
        assert found.from_account.name == "Account2"
        assert found.to_account.id == a.id

    def test_absent_endpoint_is_none(self, ledger, accounts):
        a, _ = accounts
        stored = ledger.add_register(make_register(datetime(2017, 1, 1), 5, a, None))

        found = ledger.get_register_by_id(stored.id)
        assert found.from_account.id == a.id
        assert found.to_account is None

    def test_missing(self, ledger, accounts):
        with pytest.raises(NotFoundError):
            ledger.get_register_by_id(12345)


class TestRemoveRegister:
    def test_remove(self, ledger, accounts):
        a, b = accounts
        now = datetime.now()
        r1 = ledger.add_register(make_register(now, 50, b, a))
        ledger.add_register(make_register(now, 30, a, b))
        removed_id = r1.id

        register = ledger.get_register_by_id(removed_id)
        ledger.remove_register(register)

        assert register.id == 0
        with pytest.raises(NotFoundError):
            ledger.get_register_by_id(removed_id)
        assert ledger.get_value(a, now.month, now.year) == -30

    def test_requires_valid_id(self, ledger, accounts):
        a, b = accounts
        with pytest.raises(ValidationError):
            ledger.remove_register(make_register(datetime(2017, 1, 1), 5, b, a))

    def test_removing_twice_fails(self, ledger, accounts):
        a, b = accounts
        register = ledger.add_register(make_register(datetime(2017, 1, 1), 5, b, a))
        ledger.remove_register(register)

        with pytest.raises(ValidationError):
            ledger.remove_register(register)

    def test_name_must_match(self, ledger, accounts):
        a, b = accounts
        register = ledger.add_register(make_register(datetime(2017, 1, 1), 5, b, a))
        impostor = make_register(register.time, 5, b, a, name="Other")
        impostor.id = register.id

        with pytest.raises(NotFoundError):
            ledger.remove_register(impostor)
        assert ledger.get_register_by_id(register.id).name == "Test"


class TestDatePeriod:
    def test_returns_registers_in_period(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime.now(), 30, a, b))
        old = ledger.add_register(make_register(datetime(2000, 10, 1), 50, b, a))
        ledger.add_register(make_register(datetime.now(), 130, b, a))

        registers = ledger.get_registers_by_date_period(
            datetime(2000, 9, 20), datetime(2000, 10, 20)
        )
        assert [r.id for r in registers] == [old.id]

    def test_boundaries_are_excluded(self, ledger, accounts):
        a, b = accounts
        start, end = datetime(2017, 1, 10), datetime(2017, 3, 10)
        ledger.add_register(make_register(start, 1, b, a))
        inside = ledger.add_register(make_register(start + timedelta(seconds=1), 2, b, a))
        ledger.add_register(make_register(end, 3, b, a))

        registers = ledger.get_registers_by_date_period(start, end)
        assert [r.id for r in registers] == [inside.id]

    def test_ordered_by_time(self, ledger, accounts):
        a, b = accounts
        late = ledger.add_register(make_register(datetime(2017, 3, 1), 1, b, a))
        early = ledger.add_register(make_register(datetime(2017, 1, 1, 12), 1, b, a))
        middle = ledger.add_register(make_register(datetime(2017, 2, 1), 1, b, a))

        registers = ledger.get_registers_by_date_period(
            datetime(2016, 12, 1), datetime(2017, 12, 1)
        )
        assert [r.id for r in registers] == [early.id, middle.id, late.id]

    def test_inverted_period_is_empty(self, ledger, accounts):
        a, b = accounts
        ledger.add_register(make_register(datetime(2017, 1, 5), 1, b, a))

        assert ledger.get_registers_by_date_period(
            datetime(2017, 2, 1), datetime(2017, 1, 1)
        ) == []

    def test_account_registers_half_open(self, ledger, accounts):
        a, b = accounts
        c = ledger.create_account("Account3")
        at_start = ledger.add_register(make_register(datetime(2017, 1, 1), 1, b, a))
        ledger.add_register(make_register(datetime(2017, 1, 2), 1, b, c))
        ledger.add_register(make_register(datetime(2017, 2, 1), 1, a, b))

        registers = ledger.get_account_registers(
            a, datetime(2017, 1, 1), datetime(2017, 2, 1)
        )
        assert [r.id for r in registers] == [at_start.id]

    def test_fractional_second_bounds(self, ledger, accounts):
        a, b = accounts
        moment = datetime(2024, 1, 5, 10, 0, 0)
        half = timedelta(milliseconds=500)
        register = ledger.add_register(make_register(moment, 7, b, a))

        assert [r.id for r in ledger.get_registers_by_date_period(
            datetime(2024, 1, 1), moment + half
        )] == [register.id]
        assert ledger.get_registers_by_date_period(moment + half, datetime(2024, 2, 1)) == []
        assert [r.id for r in ledger.get_registers_by_date_period(
            moment - half, datetime(2024, 2, 1)
        )] == [register.id]

        assert [r.id for r in ledger.get_account_registers(
            a, moment - half, moment + half
        )] == [register.id]
        assert ledger.get_account_registers(a, moment + half, datetime(2024, 2, 1)) == []

        assert ledger.store.get_balance(a.id, moment + half) == 7
        assert ledger.store.get_balance(a.id, moment) == 0


class TestAccounts:
    def test_create_and_lookup(self, ledger):
        account = ledger.create_account("  Wallet ")

        assert account.name == "Wallet"
        assert ledger.get_account(account.id) == account
        assert ledger.get_account(str(account.id)) == account
        assert ledger.get_account("Wallet") == account

    def test_numeric_names_fall_back_to_name_lookup(self, ledger):
        account = ledger.create_account("2024")
        assert ledger.get_account("2024") == account

    def test_rename_keeps_creation_time(self, ledger):
        account = ledger.create_account("Wallet")
        renamed = ledger.rename_account(account.id, "Pocket")

        found = ledger.get_account(account.id)
        assert renamed.name == "Pocket"
        assert found.name == "Pocket"
        assert found.created_at == account.created_at

    def test_rename_missing_account(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.rename_account(42, "Nobody")

    @pytest.mark.parametrize("name", ["", "   ", None, "x" * 101])
    def test_invalid_names(self, ledger, name):
        with pytest.raises(ValidationError):
            ledger.create_account(name)

    def test_list_accounts(self, ledger):
        assert ledger.list_accounts() == []
        a = ledger.create_account("Account1")
        b = ledger.create_account("Account2")

        assert [acc.id for acc in ledger.list_accounts()] == [a.id, b.id]

    def test_duplicate_names_first_match_wins(self, ledger):
        first = ledger.create_account("Shared")
        ledger.create_account("Shared")

        assert ledger.get_account("Shared").id == first.id
