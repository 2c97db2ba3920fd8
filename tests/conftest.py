import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import qti_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


MCQ_DOCUMENT = """Item ID: 1 A type: 4 options
What is 2+2?
A. 3
B. 4
Answer: B
"""

EMQ_DOCUMENT = """Item ID: 201 R type
Options ID: 10
Fever in the returning traveller
A. Malaria
B. Dengue
C. Typhoid
For each patient select the most likely diagnosis.
A 24-year-old returns from Ghana with fever.
Answer: A

Item ID: 202 R type
With reference to the previous Options ID: 10
A 30-year-old returns from Thailand with a rash.
Answer: B
"""

EMQ_SUB_QUESTION_DOCUMENT = """Item ID: 300 R type
Chest pain
Options ID: 12
A. Angina
B. Pericarditis
C. Aortic dissection
Choose the most likely diagnosis for each patient.
Sub-Question 1: Tearing pain radiating to the back.
Answer: C
Sub-Question 2: Pain relieved by sitting forward.
Answer: B
"""

SAQ_DOCUMENT = """Item ID: 401 SAQ
A 54-year-old man presents with severe epigastric pain.
(a) List two causes of acute pancreatitis. (2 marks)
(b) Outline the initial management. (3 marks)
Answer: (a) Gallstones; alcohol
(b) IV fluids and analgesia
"""

METADATA_DOCUMENT = """Item ID: 501 A type: 5 options
Which drug is first-line for stable angina?
A. Aspirin
B. Nitrates
C. Beta blockers
D. Digoxin
E. Warfarin
Answer: C
Profile: <specialty>Cardiology</specialty><Status>Active</Status>
Last Use Statistics: Examination Year: 2019 Difficulty Level: 65 Discrimination Index: 0.31
Background Info: Tests first-line therapy.
End-of-Item
"""


# Common test fixtures
@pytest.fixture
def mcq_text() -> str:
    return MCQ_DOCUMENT


@pytest.fixture
def emq_text() -> str:
    return EMQ_DOCUMENT


@pytest.fixture
def emq_sub_question_text() -> str:
    return EMQ_SUB_QUESTION_DOCUMENT


@pytest.fixture
def saq_text() -> str:
    return SAQ_DOCUMENT


@pytest.fixture
def metadata_text() -> str:
    return METADATA_DOCUMENT


@pytest.fixture
def mixed_text() -> str:
    """One item of each type in a single document."""
    return "\n".join([MCQ_DOCUMENT, EMQ_DOCUMENT, SAQ_DOCUMENT])
