class GlobalMessages:
    # Auth Messages
    INVALID_CREDENTIALS = "Invalid login or password."
    COULD_NOT_VALIDATE = "Could not validate credentials."
    AUTH_HEADER_MISSING = "Authorization header is missing."

    # Course Messages
    COURSE_NOT_FOUND = "Course not found."
    COURSE_ALREADY_EXISTS = "A course with that name already exists."
    COURSE_NAME_UNKNOWN = "Course name does not exist."

    # Topic Messages
    TOPIC_NOT_FOUND = "Topic not found."
    TOPIC_ALREADY_EXISTS = "A topic with that title and body already exists."
    TOPIC_ID_INVALID = "The topic id is required and must be a positive integer."
    COURSE_ID_NOT_INTEGER = "The course_id must be a valid integer."
    COURSE_ID_NOT_POSITIVE = "The course_id must be a positive integer."
    NO_TOPICS_FOR_FILTER = "No topics found for course '{course_name}' in year {year}."

    # Search Messages
    COURSE_NAME_REQUIRED = "The field 'nombreCurso' is required."
    YEAR_REQUIRED = "The field 'ano' is required."
    YEAR_NOT_DIGITS = "The field 'ano' must contain only digits (e.g. 2023, 2024)."
    YEAR_OUT_OF_RANGE = "The field 'ano' must be between {min_year} and {max_year}."

    # Reply Messages
    REPLY_ALREADY_EXISTS = "An identical reply already exists for this topic."
    SOLUTION_FLAG_INVALID = "The field 'solution' can only be 'true' or 'false'."
    SOLUTION_MESSAGE_REQUIRED = "The field 'message' is required when marking a solution."
    SOLUTION_AUTHOR_REQUIRED = "The field 'author' is required when marking a solution."

    # Rule Messages
    SOLUTION_EXISTS = "This topic already has a solution. Only one solution is allowed per topic."
    SELF_SOLUTION = "The topic author cannot mark their own reply as the solution."
    MESSAGE_TOO_SHORT = "The message must be at least {min_length} characters long."
    TITLE_TOO_SHORT = "The title must be at least {min_length} characters long."
