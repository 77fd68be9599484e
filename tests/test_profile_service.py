"""Tests for ProfileService."""

from datetime import date

import pytest

from devconnector.errors import (
    ExternalLookupFailed,
    InternalFault,
    InvalidCredential,
    ProfileNotFound,
    ValidationFailed,
)
from devconnector.models import Education, Experience, Profile, User
from devconnector.repositories import ProfileRepository
from devconnector.schemas import ProfileFields
from devconnector.security import Identity
from devconnector.services import ProfileService, account_cleanup_hooks, register_account_cleanup
from devconnector.services import profile_service as profile_service_module


@pytest.fixture
def service(test_session, fake_fetcher):
    return ProfileService(test_session, fetcher=fake_fetcher, cleanup_hooks=[])


@pytest.fixture
def existing_profile(service, identity, sample_profile_input):
    return service.upsert_profile(identity, sample_profile_input)


class TestUpsertProfile:
    def test_creates_profile_with_parsed_skills(self, service, identity, sample_profile_input):
        profile = service.upsert_profile(identity, sample_profile_input)

        assert profile.user_id == identity.user_id
        assert profile.status == "Developer"
        assert profile.skills == ["python", "fastapi", "sql"]
        assert profile.company == "Acme"
        assert profile.githubusername == "octocat"
        assert profile.social == {
            "twitter": "https://twitter.com/jane",
            "linkedin": "https://linkedin.com/in/jane",
        }
        assert profile.experience == []
        assert profile.education == []

    def test_skills_keep_order_and_empty_segments(self, service, identity):
        profile = service.upsert_profile(identity, {"status": "Developer", "skills": " go ,,rust "})

        assert profile.skills == ["go", "", "rust"]

    def test_create_without_social_links(self, service, identity):
        profile = service.upsert_profile(
            identity, {"status": "Developer", "skills": "go", "twitter": None}
        )

        assert profile.social == {}
        assert profile.website is None

    def test_create_requires_status_and_skills(self, service, identity):
        with pytest.raises(ValidationFailed) as exc_info:
            service.upsert_profile(identity, {"company": "Acme"})

        assert exc_info.value.reason == "incomplete_profile"
        assert exc_info.value.messages == ["Status is required", "Skills is required"]

    def test_blank_status_is_rejected(self, service, identity, existing_profile):
        with pytest.raises(ValidationFailed) as exc_info:
            service.upsert_profile(identity, {"status": ""})

        assert exc_info.value.reason == "blank_required_field"
        assert exc_info.value.errors == [
            {"msg": "Status is required", "param": "status", "location": "body"}
        ]

    def test_update_merges_only_supplied_fields(self, service, identity, existing_profile):
        profile = service.upsert_profile(identity, {"location": "Lisbon"})

        assert profile.id == existing_profile.id
        assert profile.location == "Lisbon"
        assert profile.company == "Acme"
        assert profile.bio == "Backend developer"
        assert profile.status == "Developer"
        assert profile.skills == ["python", "fastapi", "sql"]
        assert profile.social["twitter"] == "https://twitter.com/jane"

    def test_supplied_null_clears_field(self, service, identity, existing_profile):
        profile = service.upsert_profile(identity, {"company": None})

        assert profile.company is None
        assert profile.website == "https://acme.example.com"

    def test_social_links_merge_per_network(self, service, identity, existing_profile):
        profile = service.upsert_profile(
            identity,
            {"youtube": "https://youtube.com/jane", "linkedin": None},
        )

        assert profile.social == {
            "twitter": "https://twitter.com/jane",
            "youtube": "https://youtube.com/jane",
        }

    def test_repeated_upsert_is_idempotent(self, service, identity, sample_profile_input):
        first = service.upsert_profile(identity, sample_profile_input)
        snapshot = (first.status, list(first.skills), dict(first.social), first.company)

        second = service.upsert_profile(identity, sample_profile_input)

        assert second.id == first.id
        assert (second.status, second.skills, second.social, second.company) == snapshot
        assert len(service.list_profiles()) == 1

    def test_accepts_field_model(self, service, identity):
        fields = ProfileFields(status="Student", skills="html")

        profile = service.upsert_profile(identity, fields)

        assert profile.status == "Student"
        assert profile.skills == ["html"]
        assert profile.company is None

    def test_unknown_user_is_invalid_credential(self, service):
        with pytest.raises(InvalidCredential) as exc_info:
            service.upsert_profile(Identity(user_id=999), {"status": "Developer", "skills": "go"})

        assert exc_info.value.reason == "unknown_user"


class TestReads:
    def test_get_own_profile(self, service, identity, existing_profile):
        assert service.get_own_profile(identity).id == existing_profile.id

    def test_get_own_profile_missing(self, service, identity):
        with pytest.raises(ProfileNotFound) as exc_info:
            service.get_own_profile(identity)

        assert exc_info.value.messages == ["There is no profile for this user"]

    def test_list_profiles_includes_user(self, service, identity, other_user, existing_profile):
        service.upsert_profile(Identity(user_id=other_user.id), {"status": "Manager", "skills": "jira"})

        profiles = service.list_profiles()

        assert [p.user.name for p in profiles] == ["Jane Doe", "John Roe"]

    def test_list_profiles_empty(self, service):
        assert service.list_profiles() == []

    def test_get_by_user_id(self, service, user, existing_profile):
        profile = service.get_profile_by_user_id(str(user.id))

        assert profile.id == existing_profile.id
        assert profile.user.avatar == user.avatar

    @pytest.mark.parametrize("raw_id", ["abc", "", "-3", "0", "1.5", "99999999999999999999"])
    def test_malformed_id_reads_as_not_found(self, service, existing_profile, raw_id):
        with pytest.raises(ProfileNotFound) as exc_info:
            service.get_profile_by_user_id(raw_id)

        assert exc_info.value.reason == "malformed_id"
        assert exc_info.value.messages == ["Profile not found"]

    def test_absent_profile_reads_as_not_found(self, service, other_user):
        with pytest.raises(ProfileNotFound) as exc_info:
            service.get_profile_by_user_id(other_user.id)

        assert exc_info.value.reason == "absent"
        assert exc_info.value.messages == ["Profile not found"]


class TestHistory:
    def test_experience_is_newest_first(self, service, identity, existing_profile, sample_experience):
        service.add_experience(identity, {**sample_experience, "title": "Junior Developer"})
        profile = service.add_experience(identity, sample_experience)

        assert [e.title for e in profile.experience] == ["Senior Developer", "Junior Developer"]
        assert [e.position for e in profile.experience] == [0, 1]
        assert profile.experience[0].from_date == date(2019, 3, 1)
        assert profile.experience[0].to_date == date(2022, 6, 30)

    def test_order_survives_reload(self, service, test_session, identity, existing_profile, sample_experience):
        for title in ("First", "Second", "Third"):
            service.add_experience(identity, {**sample_experience, "title": title})
        test_session.commit()
        test_session.expunge_all()

        reloaded = ProfileRepository(test_session).get_by_user_id(identity.user_id)

        assert [e.title for e in reloaded.experience] == ["Third", "Second", "First"]

    def test_entries_get_distinct_ids(self, service, identity, existing_profile, sample_experience):
        service.add_experience(identity, sample_experience)
        profile = service.add_experience(identity, sample_experience)

        ids = [e.id for e in profile.experience]
        assert len(set(ids)) == 2
        assert all(ids)

    def test_blank_to_date_means_ongoing(self, service, identity, existing_profile, sample_experience):
        profile = service.add_experience(
            identity, {**sample_experience, "to": "", "current": True}
        )

        assert profile.experience[0].to_date is None
        assert profile.experience[0].current is True

    def test_invalid_experience_lists_every_missing_field(self, service, identity, existing_profile):
        with pytest.raises(ValidationFailed) as exc_info:
            service.add_experience(identity, {"company": "Acme"})

        assert sorted(exc_info.value.messages) == ["From date is required", "Title is required"]
        assert service.get_own_profile(identity).experience == []

    def test_add_experience_without_profile(self, service, identity, sample_experience):
        with pytest.raises(ProfileNotFound):
            service.add_experience(identity, sample_experience)

    def test_add_then_remove_restores_list(self, service, identity, existing_profile, sample_experience):
        before = [e.id for e in service.add_experience(identity, sample_experience).experience]
        added = service.add_experience(identity, {**sample_experience, "title": "CTO"}).experience[0]

        profile = service.remove_experience(identity, added.id)

        assert [e.id for e in profile.experience] == before
        assert profile.experience[0].position == 0

    def test_remove_unknown_id_is_noop(self, service, identity, existing_profile, sample_experience):
        service.add_experience(identity, sample_experience)

        profile = service.remove_experience(identity, "does-not-exist")

        assert len(profile.experience) == 1

    def test_removed_entry_is_deleted(self, service, test_session, identity, existing_profile, sample_education):
        entry_id = service.add_education(identity, sample_education).education[0].id

        service.remove_education(identity, entry_id)

        assert test_session.get(Education, entry_id) is None

    def test_education_is_newest_first(self, service, identity, existing_profile, sample_education):
        service.add_education(identity, sample_education)
        profile = service.add_education(identity, {**sample_education, "degree": "PhD"})

        assert [e.degree for e in profile.education] == ["PhD", "MSc"]
        assert profile.education[1].fieldofstudy == "Computer Science"

    def test_invalid_education(self, service, identity, existing_profile):
        with pytest.raises(ValidationFailed) as exc_info:
            service.add_education(identity, {"school": "MIT", "degree": "", "from": "2010-01-01"})

        assert [e["param"] for e in exc_info.value.errors] == ["degree", "fieldofstudy"]
        assert exc_info.value.messages == ["Degree is required", "Field of study is required"]


class TestDeleteAccount:
    def test_deletes_profile_history_and_user(
        self, service, test_session, identity, existing_profile, sample_experience, sample_education
    ):
        service.add_experience(identity, sample_experience)
        service.add_education(identity, sample_education)

        service.delete_own_profile_and_account(identity)

        assert test_session.get(User, identity.user_id) is None
        assert test_session.query(Profile).count() == 0
        assert test_session.query(Experience).count() == 0
        assert test_session.query(Education).count() == 0

    def test_own_profile_gone_after_delete(self, service, identity, existing_profile):
        service.delete_own_profile_and_account(identity)

        with pytest.raises(ProfileNotFound) as exc_info:
            service.get_own_profile(identity)

        assert exc_info.value.messages == ["There is no profile for this user"]

    def test_user_without_profile(self, service, test_session, identity):
        service.delete_own_profile_and_account(identity)

        assert test_session.get(User, identity.user_id) is None

    def test_already_deleted_account(self, service, identity):
        service.delete_own_profile_and_account(identity)
        service.delete_own_profile_and_account(identity)

    def test_other_accounts_untouched(self, service, identity, other_user, existing_profile):
        service.upsert_profile(Identity(user_id=other_user.id), {"status": "Manager", "skills": "jira"})

        service.delete_own_profile_and_account(identity)

        assert service.get_profile_by_user_id(other_user.id).user.name == "John Roe"

    def test_runs_cleanup_hooks(self, test_session, fake_fetcher, identity):
        seen = []
        service = ProfileService(
            test_session,
            fetcher=fake_fetcher,
            cleanup_hooks=[lambda session, user_id: seen.append(user_id)],
        )

        service.delete_own_profile_and_account(identity)

        assert seen == [identity.user_id]

    def test_failing_hook_becomes_internal_fault(self, test_session, fake_fetcher, identity):
        def broken_hook(session, user_id):
            raise RuntimeError("posts table unavailable")

        service = ProfileService(test_session, fetcher=fake_fetcher, cleanup_hooks=[broken_hook])

        with pytest.raises(InternalFault) as exc_info:
            service.delete_own_profile_and_account(identity)

        assert exc_info.value.reason == "RuntimeError"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_register_account_cleanup(monkeypatch):
    monkeypatch.setattr(profile_service_module, "_account_cleanup_hooks", [])

    @register_account_cleanup
    def remove_posts(session, user_id):
        pass

    register_account_cleanup(remove_posts)

    assert account_cleanup_hooks() == [remove_posts]


class TestExternalRepos:
    def test_forwards_lookup_parameters(self, service, fake_fetcher):
        fake_fetcher.repos = [{"name": "hello-world"}]

        repos = service.fetch_external_repos("octocat")

        assert repos == [{"name": "hello-world"}]
        assert fake_fetcher.calls == [
            {"username": "octocat", "per_page": 5, "sort": "created", "direction": "asc"}
        ]

    def test_lookup_failure_propagates(self, service, fake_fetcher):
        fake_fetcher.error = ExternalLookupFailed(reason="upstream_status", upstream_status=404)

        with pytest.raises(ExternalLookupFailed) as exc_info:
            service.fetch_external_repos("ghost")

        assert exc_info.value.messages == ["No github profile found"]
