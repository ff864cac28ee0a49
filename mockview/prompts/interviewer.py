"""
AI Interviewer Prompt Templates

Contains structured prompts for:
- Root question generation for a competency
- Follow-up questions (clarify / probe)
- Simplified retry variants used after malformed output
"""

from mockview.models.evaluation import FollowUpType
from mockview.models.generation import FollowUpContext, QuestionContext


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Open-ended questions that reveal depth
    - Reference the candidate's own experience
    - Match the role's seniority
    """

    SYSTEM_CONTEXT = """You are a senior technical interviewer at a leading tech company. Your task is to generate thoughtful interview questions that assess candidates effectively.

You must:
1. Create open-ended questions that reveal depth of knowledge
2. Reference the candidate's specific experience when possible
3. Match question difficulty to the role's seniority level
4. Use behavioral (STAR format) questions for soft skills
5. Focus on real-world scenarios and problem-solving

You must NOT:
1. Ask yes/no questions
2. Ask trivia or factual recall questions
3. Reference skills not mentioned in the CV or role requirements
4. Be condescending or overly challenging"""

    FOLLOW_UP_INSTRUCTIONS = {
        FollowUpType.CLARIFY: (
            "Ask for clarification or a specific example. "
            "The previous answer was vague or incomplete."
        ),
        FollowUpType.PROBE: (
            "Probe deeper into the topic. "
            "The previous answer was adequate but we want to explore further."
        ),
    }

    def generate_question_prompt(self, context: QuestionContext) -> str:
        """Generate prompt for a root question in one competency."""

        profile = context.profile
        role = context.role
        competency = context.competency

        skills = ", ".join(profile.skills[:5]) or "technical skills"
        competency_skills = ", ".join(competency.skills) or "general skills"

        prompt = f"""Generate an interview question for a {role.seniority} level {role.title} candidate.

CANDIDATE BACKGROUND:
- Experience: {profile.summary_line()}
- Key Skills: {skills}
- Years of Experience: {profile.total_years_experience:g}

COMPETENCY TO ASSESS: {competency.name}
- Skills in this area: {competency_skills}
- Weight: {round(competency.weight * 100)}% of the role

This is question {context.question_number} of the interview.

Return a JSON object with this exact structure:
{{
  "question_text": "Your interview question here. Open-ended, referencing the candidate's experience where relevant.",
  "competency": "{competency.name}",
  "expected_topics": ["topic1", "topic2", "topic3"],
  "difficulty": "appropriate|challenging",
  "type": "technical|behavioral|scenario"
}}

Guidelines:
- For technical questions: Focus on design decisions, trade-offs, problem-solving
- For behavioral questions: Use STAR format ("Tell me about a time when...")
- Reference specific items from the candidate's CV when relevant

Return ONLY the JSON object, no additional text."""

        return prompt

    def generate_followup_prompt(self, context: FollowUpContext) -> str:
        """Generate prompt for a follow-up to the previous answer."""

        instructions = self.FOLLOW_UP_INSTRUCTIONS[context.follow_up_type]

        prompt = f"""Generate a follow-up interview question.

PREVIOUS QUESTION:
{context.previous_question}

CANDIDATE'S ANSWER:
{context.previous_answer}

EVALUATION:
{context.evaluation_reasoning or "No reasoning provided"}

FOLLOW-UP TYPE: {context.follow_up_type.value}
{instructions}

COMPETENCY: {context.competency}
CURRENT DEPTH: {context.depth} (deeper questions should be more specific)

Return a JSON object with this exact structure:
{{
  "question_text": "Your follow-up question here, directly related to the previous answer.",
  "competency": "{context.competency}",
  "expected_topics": ["topic1", "topic2"],
  "type": "follow_up",
  "follow_up_type": "{context.follow_up_type.value}"
}}

Guidelines for follow-up questions:
- CLARIFY: "Could you give me a specific example of...", "Walk me through the steps..."
- PROBE: "How would you handle it differently?", "What were the trade-offs?"

Return ONLY the JSON object, no additional text."""

        return prompt

    def generate_simple_question_prompt(self, context: QuestionContext) -> str:
        """Shorter prompt used after the backend returned malformed output."""
        return f"""Write one open-ended interview question about {context.competency.name}.

Return this JSON:
{{"question_text": "...", "competency": "{context.competency.name}", "expected_topics": []}}

Return valid JSON only."""

    def generate_simple_followup_prompt(self, context: FollowUpContext) -> str:
        """Shorter follow-up prompt used after malformed output."""
        return f"""The candidate answered: "{context.previous_answer[:300]}"

Write one short follow-up question ({context.follow_up_type.value}) about {context.competency}.

Return this JSON:
{{"question_text": "...", "competency": "{context.competency}", "expected_topics": [], "follow_up_type": "{context.follow_up_type.value}"}}

Return valid JSON only."""
