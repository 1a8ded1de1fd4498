"""JSON shapes shared by several routers (camelCase, as the frontend reads them)."""

from pydantic.alias_generators import to_camel

from skillshub.models import Application, EmployerProfile, FileObject, Job, SeekerProfile, User
from skillshub.models.enums import ApplicationStatus
from skillshub.models.job import TYPE_SPECIFIC_FIELDS


def file_ref(file: FileObject | None) -> dict | None:
    if file is None:
        return None
    return {"id": file.id, "bucketKey": file.bucket_key, "contentType": file.content_type}


def user_name(user: User | None) -> str:
    return user.full_name if user else ""


def job_skills(job: Job) -> list[dict]:
    return [
        {"id": js.skill.id, "name": js.skill.name, "slug": js.skill.slug, "required": js.required}
        for js in job.skills
    ]


def seeker_skills(profile: SeekerProfile) -> list[dict]:
    return [
        {"id": ss.skill.id, "name": ss.skill.name, "slug": ss.skill.slug, "level": ss.level}
        for ss in profile.skills
    ]


def employer_summary(employer: EmployerProfile) -> dict:
    return {
        "id": employer.id,
        "name": employer.org_name,
        "verified": employer.verified,
        "companyLogo": file_ref(employer.company_logo_file),
    }


def job_summary(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "type": job.type,
        "location": job.location,
        "salaryRange": job.salary_range,
        "status": job.status,
        "employer": employer_summary(job.employer),
        "skills": job_skills(job),
        "createdAt": job.created_at,
    }


def job_detail(job: Job) -> dict:
    data = job_summary(job)
    for field in TYPE_SPECIFIC_FIELDS:
        data[to_camel(field)] = getattr(job, field)
    data["updatedAt"] = job.updated_at
    return data


def applications_by_status(job: Job) -> dict:
    return {s.value.lower(): job.count_applications(s.value) for s in ApplicationStatus}


def application_for_employer(application: Application, files: dict[str, FileObject] | None = None) -> dict:
    files = files or {}
    user = application.user
    profile = user.seeker_profile
    return {
        "id": application.id,
        "status": application.status,
        "coverLetterText": application.cover_letter_text,
        "expectedPay": application.expected_pay,
        "createdAt": application.created_at,
        "updatedAt": application.updated_at,
        "coverLetterFile": file_ref(files.get(application.cover_letter_file_id)),
        "cvFile": file_ref(files.get(application.cv_file_id)),
        "job": {
            "id": application.job.id,
            "title": application.job.title,
            "type": application.job.type,
            "status": application.job.status,
        },
        "applicant": {
            "id": user.id,
            "name": user.full_name,
            "email": user.email,
            "phone": user.phone,
            "profile": {
                "id": profile.id,
                "pathway": profile.pathway,
                "profession": profile.profession,
                "headline": profile.headline,
                "yearsExperience": profile.years_experience,
                "skills": seeker_skills(profile),
            } if profile else None,
        },
    }
