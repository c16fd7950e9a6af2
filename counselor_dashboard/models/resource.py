from dataclasses import dataclass, field


@dataclass(frozen=True)
class Resource:
    id: str
    title: str
    description: str
    file_url: str
    file_type: str           # pdf/doc
    category: str            # key of RESOURCE_CATEGORIES
    tags: list[str] = field(default_factory=list)


# Static library shipped with the dashboard
RESOURCES = [
    Resource("g1", "First Session Guide",
             "Intake procedures and the essential questions for a first counseling session.",
             "/resources/first-session-guide.pdf", "pdf", "guides", ["New Clients", "Intake"]),
    Resource("g2", "Treatment Planning Template",
             "Template for individual treatment plans with goals and progress checkpoints.",
             "/resources/treatment-plan.pdf", "pdf", "guides", ["Planning", "Documentation"]),
    Resource("g3", "Progress Note Templates",
             "SOAP and DAP note templates for session documentation.",
             "/resources/progress-notes.doc", "doc", "guides", ["Documentation", "Professional"]),
    Resource("g4", "Termination Checklist",
             "Steps for closing a counseling relationship while keeping care continuous.",
             "/resources/termination.pdf", "pdf", "guides", ["Termination", "Best Practices"]),
    Resource("w1", "Anxiety Management Toolkit",
             "Breathing exercises, thought records and anxiety tracking sheets.",
             "/resources/anxiety-toolkit.pdf", "pdf", "worksheets", ["Anxiety", "Coping Skills"]),
    Resource("w2", "Depression Activity Journal",
             "Daily activity and mood journal for behavioral activation.",
             "/resources/depression-journal.pdf", "pdf", "worksheets", ["Depression", "Monitoring"]),
    Resource("w3", "Stress Management Planner",
             "Weekly planner for identifying stressors and scheduling coping strategies.",
             "/resources/stress-planner.pdf", "pdf", "worksheets", ["Stress", "Planning"]),
    Resource("w4", "Relationship Communication Exercises",
             "Structured exercises for active listening and conflict resolution.",
             "/resources/communication-exercises.pdf", "pdf", "worksheets", ["Relationships", "Communication"]),
    Resource("t1", "Crisis Intervention Training",
             "Protocols for assessing and responding to clients in crisis.",
             "/resources/crisis-training.pdf", "pdf", "training", ["Crisis", "Emergency"]),
    Resource("t2", "Ethical Decision Making",
             "Frameworks for working through ethical dilemmas in practice.",
             "/resources/ethics.pdf", "pdf", "training", ["Ethics", "Professional Development"]),
    Resource("t3", "Cultural Competency Course",
             "Material on working with clients from diverse backgrounds.",
             "/resources/cultural-competency.pdf", "pdf", "training", ["Culture", "Diversity"]),
    Resource("t4", "Telehealth Best Practices",
             "Running effective and secure online counseling sessions.",
             "/resources/telehealth.pdf", "pdf", "training", ["Online Therapy", "Technology"]),
    Resource("a1", "Mental Health Assessment Package",
             "Screening instruments for common mental health concerns.",
             "/resources/assessment-package.pdf", "pdf", "assessments", ["Screening", "Diagnosis"]),
    Resource("a2", "Risk Assessment Tools",
             "Instruments for suicide and self-harm risk assessment.",
             "/resources/risk-assessment.pdf", "pdf", "assessments", ["Risk", "Safety"]),
    Resource("a3", "Progress Monitoring Scales",
             "Outcome measures for tracking client progress over time.",
             "/resources/progress-scales.pdf", "pdf", "assessments", ["Progress", "Outcomes"]),
    Resource("a4", "Relationship Assessment Tools",
             "Questionnaires on relationship satisfaction and attachment.",
             "/resources/relationship-assessment.pdf", "pdf", "assessments", ["Relationships", "Attachment"]),
]
