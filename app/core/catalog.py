# Product shown on the Stripe checkout page
PRODUCT_NAME = "Visa Circle Access"
PRODUCT_DESCRIPTION = "One-time payment for lifetime access to Visa Circle dashboard"

VISA_TYPES = (
    "CR1 / IR1",
    "K1",
    "B1-B2",
    "F1",
    "H1B",
    "L1",
    "O1",
    "E1/E2",
    "TN",
    "Other",
)

SERVICE_CENTERS = (
    "California",
    "Texas",
)

MILESTONES = (
    "Applied",
    "Biometrics",
    "Interview Scheduled",
    "Approved",
    "Rejected",
    "Additional Documents Requested",
    "Case Transferred",
    "RFE Received",
    "RFE Responded",
    "Case Closed",
)

REACTION_LIKE = "like"

COUNTRIES = (
    "India",
    "Pakistan",
    "Nigeria",
    "Philippines",
    "China",
    "Brazil",
    "Mexico",
    "Canada",
    "United Kingdom",
    "Australia",
)

EMBASSIES_BY_COUNTRY = {
    "India": ("Mumbai", "Delhi", "Chennai", "Kolkata", "Hyderabad"),
    "Pakistan": ("Islamabad", "Karachi", "Lahore"),
    "Nigeria": ("Lagos", "Abuja"),
    "Philippines": ("Manila", "Cebu"),
    "China": ("Beijing", "Shanghai", "Guangzhou"),
    "Brazil": ("São Paulo", "Rio de Janeiro", "Brasília"),
    "Mexico": ("Mexico City", "Guadalajara", "Monterrey"),
    "Canada": ("Toronto", "Vancouver", "Montreal"),
    "United Kingdom": ("London", "Manchester", "Edinburgh"),
    "Australia": ("Sydney", "Melbourne", "Perth"),
}

# Feedback board: origin -> destination routes and a shorter milestone list
FEEDBACK_ROUTES = (
    "India → US",
    "India → Canada",
    "India → UK",
    "India → Australia",
    "Pakistan → US",
    "Pakistan → Canada",
    "Pakistan → UK",
    "Nigeria → US",
    "Nigeria → Canada",
    "Philippines → US",
    "Philippines → Canada",
    "China → US",
    "China → Canada",
    "Brazil → US",
    "Brazil → Canada",
)

FEEDBACK_MILESTONES = MILESTONES[:6]

REACTION_DISLIKE = "dislike"
FEEDBACK_REACTIONS = (REACTION_LIKE, REACTION_DISLIKE)
