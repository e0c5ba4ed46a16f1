from typing import Optional

from app.schemas.interview import InterviewType


def generate_interview_questions_prompt(
    job_description: str,
    question_count: int = 5,
    interview_type: Optional[InterviewType] = None,
) -> str:
    """
    Generate the prompt for job-description based interview questions.

    Args:
        job_description: The job description pasted by the candidate.
        question_count: How many questions to ask for.
        interview_type: Optional behavioral/technical focus flags.

    Returns:
        The formatted prompt string.
    """
    focus = ""
    if interview_type is not None:
        kinds = [
            name for name, enabled in (
                ("behavioral", interview_type.behavioral),
                ("technical", interview_type.technical),
            ) if enabled
        ]
        if kinds:
            focus = f"Focus on {' and '.join(kinds)} questions.\n"

    return (
        f"Based on the following job description, generate {question_count} relevant interview questions "
        "that will help assess a candidate's fit for the role. "
        "Format the response as an array of questions.\n\n"
        f"Job Description:\n{job_description}\n\n"
        f"{focus}"
        f"Please generate {question_count} interview questions specifically tailored to this role. "
        f"Return ONLY the array of {question_count} questions without any additional text."
    )
