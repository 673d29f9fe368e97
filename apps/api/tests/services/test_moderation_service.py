"""Unit tests for ModerationService."""

from uuid import uuid4

import pytest
from courtfinder_sdk.moderation import PhotoReportActionRequest, ReviewReportActionRequest

from services.exceptions.moderation import (
    ModerationValidationError,
    PhotoNotFoundError,
    ReportAlreadyResolvedError,
    ReportNotFoundError,
    ReviewPhotoNotFoundError,
)
from services.moderation_service import CLEAR_REPORTS_NOTE, ModerationService

pytestmark = [
    pytest.mark.domain_moderation,
]

PHOTO_URL = "https://cdn.example.com/review-photos/2025/06/01/net.png"


@pytest.fixture
def service(mock_pool, mock_state, mock_reviews_repo, mock_photos_repo, court_cache):
    return ModerationService(mock_pool, mock_state, mock_reviews_repo, mock_photos_repo, court_cache)


class TestReviewReports:
    async def test_dismiss_resolves_only_the_report(
        self, service, mock_reviews_repo, mock_photo_storage, admin, report_row
    ):
        report = report_row()
        mock_reviews_repo.fetch_report.return_value = report

        result = await service.act_on_review_report(
            admin, ReviewReportActionRequest(report_id=report["id"], action="dismiss"), mock_photo_storage
        )

        assert result.success is True
        assert mock_reviews_repo.resolve_report.call_args.args[:3] == (report["id"], "dismissed", "user_admin")
        mock_reviews_repo.soft_delete_review.assert_not_called()
        mock_photo_storage.delete_photos.assert_not_called()

    async def test_delete_review_soft_deletes_and_resolves_every_pending_report(
        self, service, mock_reviews_repo, mock_photo_storage, court_cache, admin, report_row
    ):
        report = report_row()
        mock_reviews_repo.fetch_report.return_value = report
        mock_reviews_repo.resolve_pending_reports_for_review.return_value = 3

        await service.act_on_review_report(
            admin,
            ReviewReportActionRequest(report_id=report["id"], action="delete_review", resolution_note="Abusive"),
            mock_photo_storage,
        )

        assert mock_reviews_repo.soft_delete_review.call_args.args[:3] == (report["review_id"], "user_admin", "Abusive")
        assert mock_reviews_repo.resolve_pending_reports_for_review.call_args.args[:2] == (
            report["review_id"],
            "user_admin",
        )
        court_cache.invalidate.assert_called_once()

    async def test_delete_photo_strips_url_and_keeps_review(
        self, service, mock_reviews_repo, mock_photo_storage, court_cache, admin, report_row, review_row
    ):
        report = report_row()
        mock_reviews_repo.fetch_report.return_value = report
        mock_reviews_repo.remove_review_photo.return_value = review_row(uuid4(), review_id=report["review_id"])

        result = await service.act_on_review_report(
            admin,
            ReviewReportActionRequest(
                report_id=report["id"],
                action="delete_photo",
                photo_url=f" {PHOTO_URL} ",
                resolution_note="Not a court",
            ),
            mock_photo_storage,
        )

        assert result.message == "Review photo deleted."
        assert mock_reviews_repo.remove_review_photo.call_args.args == (report["review_id"], PHOTO_URL)
        assert mock_reviews_repo.resolve_report.call_args.args[:4] == (
            report["id"],
            "resolved",
            "user_admin",
            "Not a court",
        )
        mock_reviews_repo.soft_delete_review.assert_not_called()
        mock_reviews_repo.resolve_pending_reports_for_review.assert_not_called()
        mock_photo_storage.delete_photos.assert_called_once_with([PHOTO_URL])
        court_cache.invalidate.assert_not_called()

    async def test_delete_photo_requires_url(self, service, mock_reviews_repo, mock_photo_storage, admin):
        with pytest.raises(ModerationValidationError) as exc_info:
            await service.act_on_review_report(
                admin,
                ReviewReportActionRequest(report_id=uuid4(), action="delete_photo", photo_url="  "),
                mock_photo_storage,
            )

        assert exc_info.value.context["field"] == "photoUrl"
        mock_reviews_repo.fetch_report.assert_not_called()

    async def test_delete_photo_not_on_review(
        self, service, mock_reviews_repo, mock_photo_storage, admin, report_row
    ):
        report = report_row()
        mock_reviews_repo.fetch_report.return_value = report
        mock_reviews_repo.remove_review_photo.return_value = None

        with pytest.raises(ReviewPhotoNotFoundError):
            await service.act_on_review_report(
                admin,
                ReviewReportActionRequest(report_id=report["id"], action="delete_photo", photo_url=PHOTO_URL),
                mock_photo_storage,
            )

        mock_reviews_repo.resolve_report.assert_not_called()
        mock_photo_storage.delete_photos.assert_not_called()

    async def test_unknown_action_raises(self, service, mock_photo_storage, admin):
        with pytest.raises(ModerationValidationError):
            await service.act_on_review_report(
                admin, ReviewReportActionRequest(report_id=uuid4(), action="ignore"), mock_photo_storage
            )

    async def test_missing_report_raises(self, service, mock_reviews_repo, mock_photo_storage, admin):
        mock_reviews_repo.fetch_report.return_value = None

        with pytest.raises(ReportNotFoundError):
            await service.act_on_review_report(
                admin, ReviewReportActionRequest(report_id=uuid4(), action="dismiss"), mock_photo_storage
            )

    async def test_resolved_report_conflicts(self, service, mock_reviews_repo, mock_photo_storage, admin, report_row):
        report = report_row(status="dismissed")
        mock_reviews_repo.fetch_report.return_value = report

        with pytest.raises(ReportAlreadyResolvedError):
            await service.act_on_review_report(
                admin, ReviewReportActionRequest(report_id=report["id"], action="dismiss"), mock_photo_storage
            )


class TestPhotoReports:
    async def test_dismiss_report_leaves_photo(
        self, service, mock_photos_repo, mock_photo_storage, admin, report_row
    ):
        report = report_row()
        mock_photos_repo.fetch_report.return_value = report

        await service.act_on_photo(
            admin,
            PhotoReportActionRequest(action="dismiss_report", report_id=report["id"]),
            mock_photo_storage,
        )

        mock_photos_repo.resolve_report.assert_awaited_once()
        mock_photos_repo.soft_delete_photo.assert_not_called()
        mock_photo_storage.delete_photos.assert_not_called()

    async def test_delete_photo_resolves_reports_and_removes_object(
        self, service, mock_photos_repo, mock_photo_storage, admin, photo_row
    ):
        photo = photo_row(uuid4())
        mock_photos_repo.fetch_photo.return_value = photo
        mock_photos_repo.resolve_pending_reports_for_photo.return_value = 2

        result = await service.act_on_photo(
            admin,
            PhotoReportActionRequest(action="delete_photo", photo_id=photo["id"], reason="Not a court"),
            mock_photo_storage,
        )

        assert result.message == "Photo deleted."
        assert mock_photos_repo.soft_delete_photo.call_args.args[:3] == (photo["id"], "user_admin", "Not a court")
        mock_photos_repo.resolve_pending_reports_for_photo.assert_awaited_once()
        mock_photo_storage.delete_photos.assert_called_once_with([photo["photo_url"]])

    async def test_delete_photo_requires_photo_id(self, service, mock_photo_storage, admin):
        with pytest.raises(ModerationValidationError) as exc_info:
            await service.act_on_photo(admin, PhotoReportActionRequest(action="delete_photo"), mock_photo_storage)

        assert exc_info.value.context["field"] == "photoId"

    async def test_dismiss_requires_report_id(self, service, mock_photo_storage, admin):
        with pytest.raises(ModerationValidationError) as exc_info:
            await service.act_on_photo(admin, PhotoReportActionRequest(action="dismiss_report"), mock_photo_storage)

        assert exc_info.value.context["field"] == "reportId"

    async def test_delete_missing_photo_raises(self, service, mock_photos_repo, mock_photo_storage, admin):
        mock_photos_repo.fetch_photo.return_value = None

        with pytest.raises(PhotoNotFoundError):
            await service.act_on_photo(
                admin, PhotoReportActionRequest(action="delete_photo", photo_id=uuid4()), mock_photo_storage
            )

    async def test_reported_photos_group_reports_per_photo(
        self, service, mock_photos_repo, photo_row, report_row
    ):
        first = {**photo_row(uuid4()), "court_name": "Riverside Park Courts"}
        second = {**photo_row(uuid4()), "court_name": "Oak Hills Racquet Club"}
        first_reports = [
            {k: v for k, v in report_row().items() if k != "review_id"} | {"photo_id": first["id"]} for _ in range(2)
        ]
        mock_photos_repo.fetch_reported_photos.return_value = [first, second]
        mock_photos_repo.fetch_pending_reports.return_value = first_reports

        result = await service.list_reported_photos()

        assert [item.court_name for item in result] == ["Riverside Park Courts", "Oak Hills Racquet Club"]
        assert [len(item.reports) for item in result] == [2, 0]


class TestClearReports:
    async def test_dismisses_everything_and_returns_counts(
        self, service, mock_reviews_repo, mock_photos_repo, admin
    ):
        mock_reviews_repo.dismiss_all_pending_reports.return_value = 4
        mock_photos_repo.dismiss_all_pending_reports.return_value = 1

        result = await service.clear_reports(admin)

        assert (result.review_reports, result.photo_reports) == (4, 1)
        assert mock_reviews_repo.dismiss_all_pending_reports.call_args.args == ("user_admin", CLEAR_REPORTS_NOTE)
