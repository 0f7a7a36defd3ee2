"""
Tests for the append-only ledger and summary projection.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.rewards.exceptions import ImmutableTransactionError, InvalidAmount
from apps.rewards.models import PointLot, PointTransaction, Tier, TransactionKind, UserPointSummary
from apps.rewards.services import BalanceProjector, ExpirationSweeper, LedgerStore, RewardPointsService


@pytest.mark.django_db
class TestLedgerStore:

    def test_new_user_has_empty_summary(self, test_user):
        summary = UserPointSummary.objects.get(user=test_user)

        assert summary.total_points == 0
        assert summary.available_points == 0
        assert summary.level == Tier.BRONZE

    def test_earn_appends_transaction_and_updates_summary(self, test_user):
        txn = RewardPointsService.earn(test_user, 600, 'Booking completed')
        summary = BalanceProjector.get_summary(test_user)

        assert txn.kind == TransactionKind.EARNED
        assert txn.points == 600
        assert txn.balance_after == 600
        assert txn.expires_at is not None
        assert summary.total_points == 600
        assert summary.available_points == 600
        assert summary.level == Tier.SILVER
        assert summary.total_transactions == 1
        assert summary.last_earned_at == txn.created_at

    def test_earn_opens_lot(self, test_user):
        txn = RewardPointsService.earn(test_user, 100, 'Review')

        lot = PointLot.objects.get(transaction=txn)
        assert lot.points_amount == 100
        assert lot.remaining_points == 100
        assert lot.expires_at == txn.expires_at

    def test_admin_grant_never_expires(self, test_user, staff_user):
        txn = RewardPointsService.admin_grant(test_user, 250, 'Goodwill', granted_by=staff_user)

        assert txn.kind == TransactionKind.ADMIN_GRANT
        assert txn.expires_at is None
        assert txn.lot.expires_at is None
        assert BalanceProjector.get_summary(test_user).available_points == 250

    @pytest.mark.parametrize('points', [0, -5, 1.5, True, '10'])
    def test_invalid_amount_is_rejected_before_storage(self, test_user, points):
        with pytest.raises(InvalidAmount):
            RewardPointsService.earn(test_user, points, 'Bad')

        assert not PointTransaction.objects.filter(user=test_user).exists()

    def test_redeemed_kind_cannot_be_earned(self, test_user):
        with pytest.raises(InvalidAmount):
            RewardPointsService.earn(test_user, 10, 'Bad', kind=TransactionKind.REDEEMED)

    def test_append_rejects_wrong_sign(self, test_user):
        with pytest.raises(InvalidAmount):
            LedgerStore.append(test_user, TransactionKind.REDEEMED, 10, 'Bad', balance_after=0)

    def test_transactions_are_immutable(self, test_user):
        txn = RewardPointsService.earn(test_user, 100, 'Booking completed')

        txn.points = 1000
        with pytest.raises(ImmutableTransactionError):
            txn.save()
        with pytest.raises(ImmutableTransactionError):
            txn.delete()
        with pytest.raises(ImmutableTransactionError):
            PointTransaction.objects.filter(user=test_user).update(points=5)
        with pytest.raises(ImmutableTransactionError):
            PointTransaction.objects.filter(user=test_user).delete()

        txn.refresh_from_db()
        assert txn.points == 100

    def test_repeated_earn_reference_credits_once(self, test_user):
        first = RewardPointsService.earn(test_user, 50, 'Booking', reference_type='booking', reference_id='b-1')
        second = RewardPointsService.earn(test_user, 50, 'Booking', reference_type='booking', reference_id='b-1')

        assert first.id == second.id
        assert BalanceProjector.get_summary(test_user).available_points == 50

    def test_unkeyed_earns_are_not_deduplicated(self, test_user):
        RewardPointsService.earn(test_user, 50, 'Booking')
        RewardPointsService.earn(test_user, 50, 'Booking')

        assert PointTransaction.objects.filter(user=test_user).count() == 2
        assert BalanceProjector.get_summary(test_user).available_points == 100

    def test_list_by_user_newest_first_with_paging(self, test_user):
        for points in (10, 20, 30):
            RewardPointsService.earn(test_user, points, 'Earn')

        page = LedgerStore.list_by_user(test_user, page=1, page_size=2)

        assert page.total == 3
        assert [txn.points for txn in page.items] == [30, 20]
        assert page.has_next

        second = LedgerStore.list_by_user(test_user, page=2, page_size=2)
        assert [txn.points for txn in second.items] == [10]
        assert not second.has_next

    def test_list_by_user_filters_kind(self, test_user):
        RewardPointsService.earn(test_user, 100, 'Earn')
        RewardPointsService.earn(test_user, 40, 'Bonus', kind=TransactionKind.BONUS)

        page = LedgerStore.list_by_user(test_user, kind=TransactionKind.BONUS)

        assert [txn.kind for txn in page.items] == [TransactionKind.BONUS]

    def test_sum_by_user_and_kind(self, test_user):
        RewardPointsService.earn(test_user, 100, 'Earn')
        RewardPointsService.earn(test_user, 40, 'Bonus', kind=TransactionKind.BONUS)
        RewardPointsService.redeem(test_user, 30, 'Spend')

        assert LedgerStore.sum_by_user_and_kind(test_user, [TransactionKind.EARNED, TransactionKind.BONUS]) == 140
        assert LedgerStore.sum_by_user_and_kind(test_user, [TransactionKind.REDEEMED]) == -30


@pytest.mark.django_db
class TestBalanceProjector:

    def test_rebuild_matches_incremental_summary(self, test_user):
        RewardPointsService.earn(test_user, 700, 'Earn')
        RewardPointsService.earn(test_user, 100, 'Referral', kind=TransactionKind.REFERRAL)
        RewardPointsService.redeem(test_user, 300, 'Spend')

        rebuilt = BalanceProjector.rebuild(test_user)
        cached = BalanceProjector.get_summary(test_user)

        assert rebuilt.balance_fields() == cached.balance_fields()

    def test_rebuild_with_commit_repairs_drift(self, test_user):
        RewardPointsService.earn(test_user, 700, 'Earn')
        UserPointSummary.objects.filter(user=test_user).update(
            total_points=900, available_points=900, level=Tier.SILVER
        )

        repaired = BalanceProjector.rebuild(test_user, commit=True)

        assert repaired.total_points == 700
        assert repaired.available_points == 700

    def test_expiring_soon_counts_open_lots_in_window(self, test_user):
        now = timezone.now()
        RewardPointsService.earn(test_user, 100, 'Soon', expires_at=now + timedelta(days=10))
        RewardPointsService.earn(test_user, 200, 'Later', expires_at=now + timedelta(days=100))
        RewardPointsService.admin_grant(test_user, 300, 'Forever')

        assert BalanceProjector.expiring_soon(test_user, 30, now=now) == 100

    def test_overview_includes_level_and_expiring_points(self, test_user):
        RewardPointsService.earn(test_user, 600, 'Earn', expires_at=timezone.now() + timedelta(days=5))

        overview = RewardPointsService.get_points_overview(test_user)

        assert overview['summary'].available_points == 600
        assert overview['level'].level == Tier.SILVER
        assert overview['expiring_soon'] == 600


@pytest.mark.django_db
class TestLotRepair:

    def test_rebuild_with_commit_repairs_lots(self, test_user):
        older = RewardPointsService.earn(test_user, 100, 'First')
        newer = RewardPointsService.earn(test_user, 100, 'Second')
        RewardPointsService.redeem(test_user, 150, 'Discount')
        PointLot.objects.filter(transaction=older).update(remaining_points=80, is_fully_redeemed=False)
        PointLot.objects.filter(transaction=newer).update(remaining_points=5)

        assert set(BalanceProjector.lot_drift(test_user)) == {older.id, newer.id}

        BalanceProjector.rebuild(test_user, commit=True)

        assert BalanceProjector.lot_drift(test_user) == {}
        assert PointLot.objects.get(transaction=older).remaining_points == 0
        assert PointLot.objects.get(transaction=older).is_fully_redeemed
        assert PointLot.objects.get(transaction=newer).remaining_points == 50

    def test_missing_lot_is_recreated(self, test_user):
        txn = RewardPointsService.earn(test_user, 100, 'Earned')
        RewardPointsService.redeem(test_user, 30, 'Discount')
        PointLot.objects.filter(transaction=txn).delete()

        assert BalanceProjector.repair_lots(test_user) == 1

        lot = PointLot.objects.get(transaction=txn)
        assert lot.remaining_points == 70
        assert lot.expires_at == txn.expires_at

    def test_expired_lot_state_is_restored(self, test_user):
        txn = RewardPointsService.earn(test_user, 100, 'Earned', expires_at=timezone.now() - timedelta(days=1))
        ExpirationSweeper.sweep()
        PointLot.objects.filter(transaction=txn).update(remaining_points=100, is_expired=False)

        BalanceProjector.repair_lots(test_user)

        lot = PointLot.objects.get(transaction=txn)
        assert lot.is_expired
        assert lot.remaining_points == 0
        assert not lot.is_fully_redeemed
        # A repaired lot is not expired a second time
        assert ExpirationSweeper.sweep().transactions_created == 0

    def test_consistent_lots_are_left_alone(self, test_user):
        RewardPointsService.earn(test_user, 100, 'Earned')

        assert BalanceProjector.repair_lots(test_user) == 0
