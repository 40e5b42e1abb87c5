# API error handling and middleware package
