from typing import List

from schemas import Question, QuestionCatalog

# Catálogo fixo da avaliação. A ordem define a ordem das etapas do formulário.
QUESTIONS = (
    Question(
        id=1,
        title="Dominant Characteristics",
        options=[
            "The organisation is a very personal place. It is like an extended family; people share a lot of themselves.",
            "The organisation is a dynamic, entrepreneurial place. People are willing to stick their necks out and take risks.",
            "The organisation is results oriented. The major concern is getting the job done; people are competitive and achievement oriented.",
            "The organisation is a controlled and structured place. Formal procedures generally govern what people do.",
        ],
    ),
    Question(
        id=2,
        title="Organisational Leadership",
        options=[
            "Leadership is generally considered to exemplify mentoring, facilitating or nurturing.",
            "Leadership is generally considered to exemplify entrepreneurship, innovation or risk taking.",
            "Leadership is generally considered to exemplify a no-nonsense, aggressive, results-oriented focus.",
            "Leadership is generally considered to exemplify coordinating, organising or smooth-running efficiency.",
        ],
    ),
    Question(
        id=3,
        title="Management of Employees",
        options=[
            "The management style is characterised by teamwork, consensus and participation.",
            "The management style is characterised by individual risk taking, innovation, freedom and uniqueness.",
            "The management style is characterised by hard-driving competitiveness, high demands and achievement.",
            "The management style is characterised by security of employment, conformity, predictability and stability in relationships.",
        ],
    ),
    Question(
        id=4,
        title="Organisation Glue",
        options=[
            "The glue that holds the organisation together is loyalty and mutual trust. Commitment runs high.",
            "The glue that holds the organisation together is commitment to innovation and development.",
            "The glue that holds the organisation together is the emphasis on achievement and goal accomplishment.",
            "The glue that holds the organisation together is formal rules and policies. Maintaining a smooth-running organisation is important.",
        ],
    ),
    Question(
        id=5,
        title="Strategic Emphases",
        options=[
            "The organisation emphasises human development. High trust, openness and participation persist.",
            "The organisation emphasises acquiring new resources and creating new challenges. Trying new things and prospecting for opportunities are valued.",
            "The organisation emphasises competitive actions and achievement. Hitting stretch targets and winning in the marketplace are dominant.",
            "The organisation emphasises permanence and stability. Efficiency, control and smooth operations are important.",
        ],
    ),
    Question(
        id=6,
        title="Criteria of Success",
        options=[
            "Success is defined on the basis of the development of human resources, teamwork, employee commitment and concern for people.",
            "Success is defined on the basis of having the most unique or newest products. It is a product leader and innovator.",
            "Success is defined on the basis of winning in the marketplace and outpacing the competition.",
            "Success is defined on the basis of efficiency. Dependable delivery, smooth scheduling and low-cost production are critical.",
        ],
    ),
)

DESIGNATIONS = [
    "C-Suite (e.g., CEO, CFO, COO)",
    "Senior Management (e.g., Director, VP)",
    "Mid-Level Management (e.g., Manager, Team Lead)",
    "Entry-Level/Staff (e.g., Associate, Analyst)",
]

OFFICE_TYPOLOGIES = [
    "R&D Center",
    "HQ",
    "ITES",
    "Regional Office",
    "Back Office/GBS",
    "Knowledge Center/GCC",
    "Support Office",
    "Tech Office",
    "Sales & Consultancy",
    "Factory Office",
]

COHORT_TEAMS = [
    "Executive Leadership",
    "Human Resources",
    "Finance",
    "Marketing",
    "Sales",
    "Operations",
    "IT/Technology",
    "Research & Development",
    "Customer Support",
]


def list_questions() -> List[Question]:
    return list(QUESTIONS)


def get_catalog() -> QuestionCatalog:
    return QuestionCatalog(
        questions=list_questions(),
        designations=DESIGNATIONS,
        office_typologies=OFFICE_TYPOLOGIES,
        cohort_teams=COHORT_TEAMS,
    )
